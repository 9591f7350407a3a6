"""
Tests for feed filtering and facet values (posts.filters).
"""
from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from posts.filters import facet_values, filter_posts
from posts.models import Post


class FilterPostsTests(TestCase):
    def setUp(self):
        self.robotics = Post.objects.create(
            title="Robotics Lab Upgrade",
            content="<p>New robot arms</p>",
            excerpt="Lab upgraded",
            tags=["robotics", "lab"],
            department="Mechanical Engineering",
            cgpa=7.0,
        )
        self.hackathon = Post.objects.create(
            title="Hackathon",
            content="<p>Build for the smart campus</p>",
            excerpt="Code for change",
            tags=["coding", "hackathon"],
            department="Computer Engineering",
            cgpa=7.8,
        )
        self.seminar = Post.objects.create(
            title="VLSI Seminar",
            content="<p>Industry talks about robotics and chips</p>",
            tags=["vlsi", "Coding"],
            department="Electronics Engineering",
            cgpa=None,
        )

    def _ids(self, params):
        return [p.pk for p in filter_posts(params)]

    def test_no_params_returns_everything_newest_first(self):
        self.assertEqual(self._ids({}), [self.seminar.pk, self.hackathon.pk, self.robotics.pk])

    def test_search_matches_title_content_or_excerpt_case_insensitively(self):
        self.assertEqual(set(self._ids({"searchTerm": "ROBOT"})), {self.robotics.pk, self.seminar.pk})
        self.assertEqual(self._ids({"searchTerm": "code for"}), [self.hackathon.pk])
        self.assertEqual(self._ids({"searchTerm": "   "}), self._ids({}))

    def test_min_cgpa_keeps_open_and_reachable_posts(self):
        self.assertEqual(set(self._ids({"minCGPA": "7.5"})), {self.robotics.pk, self.seminar.pk})
        self.assertEqual(set(self._ids({"minCGPA": "7.8"})), {self.robotics.pk, self.hackathon.pk, self.seminar.pk})

    def test_min_cgpa_zero_means_no_filter(self):
        self.assertEqual(self._ids({"minCGPA": "0"}), self._ids({}))
        self.assertEqual(len(self._ids({"minCGPA": "0.0"})), 3)

    def test_min_cgpa_property_holds_for_every_result(self):
        for threshold in (6.9, 7.0, 7.5, 10):
            for post in filter_posts({"minCGPA": str(threshold)}):
                self.assertTrue(post.cgpa is None or post.cgpa <= threshold)

    def test_search_and_min_cgpa_are_both_applied(self):
        # "robot" matches robotics (7.0) and the seminar (no threshold).
        self.assertEqual(set(self._ids({"searchTerm": "robot", "minCGPA": "6.5"})), {self.seminar.pk})
        self.assertEqual(
            set(self._ids({"searchTerm": "robot", "minCGPA": "7"})), {self.robotics.pk, self.seminar.pk}
        )

    def test_department_exact_and_all(self):
        self.assertEqual(self._ids({"department": "Computer Engineering"}), [self.hackathon.pk])
        self.assertEqual(self._ids({"department": "computer engineering"}), [])
        self.assertEqual(len(self._ids({"department": "All"})), 3)

    def test_tag_is_exact_membership(self):
        self.assertEqual(self._ids({"tag": "coding"}), [self.hackathon.pk])
        self.assertEqual(self._ids({"tag": "Coding"}), [self.seminar.pk])
        self.assertEqual(self._ids({"tag": "cod"}), [])
        self.assertEqual(len(self._ids({"tag": "All"})), 3)

    def test_all_filters_compose(self):
        params = {"searchTerm": "campus", "department": "Computer Engineering", "tag": "hackathon", "minCGPA": "8"}
        self.assertEqual(self._ids(params), [self.hackathon.pk])
        params["minCGPA"] = "7"
        self.assertEqual(self._ids(params), [])

    def test_invalid_min_cgpa_raises(self):
        with self.assertRaises(ValidationError):
            filter_posts({"minCGPA": "high"})


class MinCgpaExampleTests(TestCase):
    def test_threshold_between_six_and_eight(self):
        none = Post.objects.create(title="open", content="x", cgpa=None)
        six = Post.objects.create(title="six", content="x", cgpa=6.0)
        Post.objects.create(title="eight", content="x", cgpa=8.0)
        self.assertEqual({p.pk for p in filter_posts({"minCGPA": "7.0"})}, {none.pk, six.pk})


class FacetValuesTests(TestCase):
    def test_distinct_sorted_values(self):
        Post.objects.create(title="a", content="x", tags=["lab", "AI"], department="Civil Engineering")
        Post.objects.create(title="b", content="x", tags=["lab", "cloud"], department="Civil Engineering")
        Post.objects.create(title="c", content="x", tags=[], department=None)
        Post.objects.create(
            title="d", content="x", tags=["bridge"], department="", deadline=timezone.now() - timedelta(days=1)
        )
        self.assertEqual(
            facet_values(),
            {"tags": ["AI", "bridge", "cloud", "lab"], "departments": ["Civil Engineering"]},
        )

    def test_empty_table(self):
        self.assertEqual(facet_values(), {"tags": [], "departments": []})
