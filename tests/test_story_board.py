"""Unit tests for app.services.story_board: estimates, status changes, tasks, deletion."""

import math
import unittest

from app.core.errors import AuthorizationError, InputValidationError, NotFoundError
from app.models import Story, StoryTask
from app.schemas.story import MAX_ESTIMATE
from app.services.story_board import (
    add_task,
    create_story,
    get_story,
    list_stories,
    normalize_estimate,
    remove_story,
    remove_task,
    set_estimate,
    set_status,
    toggle_task,
)
from tests.board_fixtures import BoardTestCase, utc


class TestNormalizeEstimate(unittest.TestCase):
    """normalize_estimate = max(1, e) for positive finite numbers, else 1."""

    def test_positive_values_kept(self) -> None:
        self.assertEqual(normalize_estimate(1), 1)
        self.assertEqual(normalize_estimate(5), 5)
        self.assertEqual(normalize_estimate(13.0), 13)

    def test_fractions_rounded_and_floored_at_one(self) -> None:
        self.assertEqual(normalize_estimate(0.4), 1)
        self.assertEqual(normalize_estimate(2.6), 3)

    def test_halves_round_up(self) -> None:
        self.assertEqual(normalize_estimate(2.5), 3)
        self.assertEqual(normalize_estimate(3.5), 4)
        self.assertEqual(normalize_estimate("1.5"), 2)

    def test_huge_values_capped(self) -> None:
        self.assertEqual(normalize_estimate(1e30), MAX_ESTIMATE)
        self.assertEqual(normalize_estimate(10**40), MAX_ESTIMATE)
        self.assertEqual(normalize_estimate(MAX_ESTIMATE), MAX_ESTIMATE)

    def test_zero_and_negative_become_one(self) -> None:
        self.assertEqual(normalize_estimate(0), 1)
        self.assertEqual(normalize_estimate(-3), 1)

    def test_non_finite_become_one(self) -> None:
        self.assertEqual(normalize_estimate(math.inf), 1)
        self.assertEqual(normalize_estimate(math.nan), 1)

    def test_non_numeric_become_one(self) -> None:
        self.assertEqual(normalize_estimate(None), 1)
        self.assertEqual(normalize_estimate("abc"), 1)
        self.assertEqual(normalize_estimate([3]), 1)
        self.assertEqual(normalize_estimate(True), 1)

    def test_numeric_string_accepted(self) -> None:
        self.assertEqual(normalize_estimate("8"), 8)


class TestCreateStory(BoardTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.dev = self.add_user("dev")
        self.other = self.add_user("other")
        self.manager = self.add_user("boss", role="manager")

    def test_zero_estimate_stored_as_one(self) -> None:
        story = create_story(self.session, self.dev, title="A", estimate=0)
        self.assertEqual(story.estimate, 1)
        self.assertEqual(story.status, "backlog")
        self.assertEqual(story.owner_id, self.dev.id)
        self.assertEqual(story.tasks, [])

    def test_title_required(self) -> None:
        with self.assertRaises(InputValidationError):
            create_story(self.session, self.dev, title="   ")
        self.assertEqual(self.session.query(Story).count(), 0)

    def test_invalid_status_rejected(self) -> None:
        with self.assertRaises(InputValidationError):
            create_story(self.session, self.dev, title="A", status="archived")

    def test_developer_cannot_create_for_someone_else(self) -> None:
        with self.assertRaises(AuthorizationError):
            create_story(self.session, self.dev, title="A", owner_id=self.other.id)

    def test_manager_can_assign_owner(self) -> None:
        story = create_story(self.session, self.manager, title="A", owner_id=self.other.id)
        self.assertEqual(story.owner_id, self.other.id)
        self.assertEqual(story.owner_name, "other")

    def test_unknown_owner_rejected(self) -> None:
        with self.assertRaises(InputValidationError):
            create_story(self.session, self.manager, title="A", owner_id=9999)


class TestListStories(BoardTestCase):
    def test_newest_story_first_and_tasks_oldest_first(self) -> None:
        dev = self.add_user("dev")
        old_id = self.add_story(dev, title="old", created_at=utc(2025, 1, 1))
        new_id = self.add_story(
            dev,
            title="new",
            created_at=utc(2025, 2, 1),
            tasks=[("first", False), ("second", True)],
        )
        stories = list_stories(self.session)
        self.assertEqual([s.id for s in stories], [new_id, old_id])
        self.assertEqual([t.title for t in stories[0].tasks], ["first", "second"])
        self.assertEqual(stories[0].owner_name, "dev")

    def test_empty_board(self) -> None:
        self.assertEqual(list_stories(self.session), [])


class TestSetStatus(BoardTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.add_user("owner")
        self.stranger = self.add_user("stranger")
        self.admin = self.add_user("root", role="admin")
        self.story_id = self.add_story(self.owner, status="done")

    def test_backwards_move_allowed(self) -> None:
        story = set_status(self.session, self.story_id, "backlog", self.owner)
        self.assertEqual(story.status, "backlog")

    def test_every_transition_allowed(self) -> None:
        for status in ("ready", "in-progress", "done", "backlog", "done", "ready"):
            with self.subTest(status=status):
                self.assertEqual(
                    set_status(self.session, self.story_id, status, self.owner).status,
                    status,
                )

    def test_invalid_status_rejected_before_lookup(self) -> None:
        with self.assertRaises(InputValidationError):
            set_status(self.session, 424242, "shipped", self.owner)

    def test_non_owner_developer_denied(self) -> None:
        with self.assertRaises(AuthorizationError):
            set_status(self.session, self.story_id, "ready", self.stranger)
        self.assertEqual(get_story(self.session, self.story_id).status, "done")

    def test_privileged_non_owner_allowed(self) -> None:
        story = set_status(self.session, self.story_id, "ready", self.admin)
        self.assertEqual(story.status, "ready")

    def test_absent_actor_denied(self) -> None:
        with self.assertRaises(AuthorizationError):
            set_status(self.session, self.story_id, "ready", None)

    def test_missing_story(self) -> None:
        with self.assertRaises(NotFoundError):
            set_status(self.session, 424242, "ready", self.admin)


class TestSetEstimate(BoardTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.add_user("owner")
        self.stranger = self.add_user("stranger")
        self.story_id = self.add_story(self.owner, estimate=3)

    def test_valid_estimate(self) -> None:
        self.assertEqual(set_estimate(self.session, self.story_id, 8, self.owner).estimate, 8)

    def test_invalid_estimates_rejected(self) -> None:
        for bad in (0, -1, 2.5, "5", None, True, MAX_ESTIMATE + 1):
            with self.subTest(value=bad):
                with self.assertRaises(InputValidationError):
                    set_estimate(self.session, self.story_id, bad, self.owner)
        self.assertEqual(get_story(self.session, self.story_id).estimate, 3)

    def test_non_owner_denied(self) -> None:
        with self.assertRaises(AuthorizationError):
            set_estimate(self.session, self.story_id, 5, self.stranger)


class TestTasks(BoardTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.add_user("owner")
        self.stranger = self.add_user("stranger")
        self.story_id = self.add_story(self.owner)

    def test_add_task_appends_open_task(self) -> None:
        first = add_task(self.session, self.story_id, "write tests", self.owner)
        second = add_task(self.session, self.story_id, "ship", self.owner)
        self.assertFalse(first.done)
        story = get_story(self.session, self.story_id)
        self.assertEqual([t.id for t in story.tasks], [first.id, second.id])

    def test_add_task_requires_title(self) -> None:
        with self.assertRaises(InputValidationError):
            add_task(self.session, self.story_id, "", self.owner)

    def test_add_task_to_missing_story(self) -> None:
        with self.assertRaises(NotFoundError):
            add_task(self.session, 424242, "x", self.owner)

    def test_toggle_round_trip(self) -> None:
        task = add_task(self.session, self.story_id, "only", self.owner)
        self.assertTrue(toggle_task(self.session, self.story_id, task.id, True, self.owner).done)
        self.assertFalse(toggle_task(self.session, self.story_id, task.id, False, self.owner).done)

    def test_toggle_requires_boolean(self) -> None:
        task = add_task(self.session, self.story_id, "only", self.owner)
        with self.assertRaises(InputValidationError):
            toggle_task(self.session, self.story_id, task.id, "yes", self.owner)  # type: ignore[arg-type]

    def test_toggle_task_of_other_story_not_found(self) -> None:
        other_story = self.add_story(self.owner, tasks=[("elsewhere", False)])
        foreign_task_id = get_story(self.session, other_story).tasks[0].id
        with self.assertRaises(NotFoundError):
            toggle_task(self.session, self.story_id, foreign_task_id, True, self.owner)

    def test_stranger_cannot_touch_tasks(self) -> None:
        task = add_task(self.session, self.story_id, "only", self.owner)
        with self.assertRaises(AuthorizationError):
            toggle_task(self.session, self.story_id, task.id, True, self.stranger)
        with self.assertRaises(AuthorizationError):
            remove_task(self.session, self.story_id, task.id, self.stranger)

    def test_remove_task(self) -> None:
        task = add_task(self.session, self.story_id, "only", self.owner)
        remove_task(self.session, self.story_id, task.id, self.owner)
        self.assertEqual(self.session.query(StoryTask).count(), 0)
        with self.assertRaises(NotFoundError):
            remove_task(self.session, self.story_id, task.id, self.owner)


class TestRemoveStory(BoardTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.add_user("owner")
        self.manager = self.add_user("boss", role="manager")
        self.story_id = self.add_story(self.owner, tasks=[("a", False), ("b", True)])

    def test_owner_developer_cannot_delete(self) -> None:
        with self.assertRaises(AuthorizationError):
            remove_story(self.session, self.story_id, self.owner)
        self.assertEqual(self.session.query(Story).count(), 1)

    def test_manager_deletes_story_and_tasks(self) -> None:
        remove_story(self.session, self.story_id, self.manager)
        self.assertEqual(self.session.query(Story).count(), 0)
        self.assertEqual(self.session.query(StoryTask).count(), 0)

    def test_missing_story(self) -> None:
        with self.assertRaises(NotFoundError):
            remove_story(self.session, 424242, self.manager)


if __name__ == "__main__":
    unittest.main()
