"""
Session state: required-state checks, the JSON blob boundary, and both stores.
"""
import json
import unittest
from unittest.mock import patch

from wahotrip.modules.planning.manual_planner import build_manual_package
from wahotrip.modules.state.app_state import (
    PACKAGES_BLOB,
    PREFERENCES_BLOB,
    SELECTED_BLOB,
    AppState,
    InMemoryStateStore,
    MissingUpstreamState,
    RedisStateStore,
    state_to_blobs,
)

from tests.helpers import prefs


def _package(package_id="ai_package_1"):
    package = build_manual_package(prefs(trip_duration=2))
    package.id = package_id
    return package


class AppStateTests(unittest.TestCase):
    def test_required_state_names_the_stage_to_return_to(self):
        state = AppState("s1")
        with self.assertRaises(MissingUpstreamState) as ctx:
            state.require_preferences()
        self.assertEqual(ctx.exception.stage, "form")
        self.assertEqual(ctx.exception.redirect_to("s1"), "/v1/planner/s1/preferences")

        with self.assertRaises(MissingUpstreamState) as ctx:
            state.require_packages()
        self.assertEqual(ctx.exception.stage, "generation")

        with self.assertRaises(MissingUpstreamState) as ctx:
            state.require_selected()
        self.assertEqual(ctx.exception.stage, "details")
        self.assertEqual(ctx.exception.redirect_to("s1"), "/v1/planner/s1/select")

    def test_select_copies_the_package(self):
        state = AppState("s1", generated_packages=[_package("a"), _package("b")])
        selected = state.select("b")
        self.assertEqual(selected.id, "b")
        selected.days[0].title = "Changed"
        self.assertNotEqual(state.generated_packages[1].days[0].title, "Changed")

    def test_select_unknown_package(self):
        state = AppState("s1", generated_packages=[_package("a")])
        with self.assertRaises(KeyError):
            state.select("zzz")

    def test_absent_parts_serialize_as_none(self):
        blobs = state_to_blobs(AppState("s1", preferences=prefs()))
        self.assertIsNotNone(blobs[PREFERENCES_BLOB])
        self.assertIsNone(blobs[PACKAGES_BLOB])
        self.assertIsNone(blobs[SELECTED_BLOB])


class InMemoryStateStoreTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryStateStore()

    def test_round_trip(self):
        state = AppState("s1", preferences=prefs(), generated_packages=[_package()])
        state.selected_package = _package("manual_package")
        self.store.save(state)

        loaded = self.store.load("s1")
        self.assertEqual(loaded.preferences, prefs())
        self.assertEqual([p.to_dict() for p in loaded.generated_packages],
                         [p.to_dict() for p in state.generated_packages])
        self.assertEqual(loaded.selected_package.id, "manual_package")

    def test_unknown_session_is_empty(self):
        loaded = self.store.load("nobody")
        self.assertIsNone(loaded.preferences)
        self.assertEqual(loaded.generated_packages, [])
        self.assertIsNone(loaded.selected_package)

    def test_malformed_blob_loads_as_absent(self):
        self.store.save(AppState("s1", preferences=prefs(), generated_packages=[_package()]))
        self.store.put_raw(PACKAGES_BLOB, "s1", "{not json")
        loaded = self.store.load("s1")
        self.assertEqual(loaded.generated_packages, [])
        self.assertIsNotNone(loaded.preferences)

    def test_wrong_shape_loads_as_absent(self):
        self.store.put_raw(PREFERENCES_BLOB, "s1", json.dumps(["not", "an", "object"]))
        self.store.put_raw(SELECTED_BLOB, "s1", json.dumps("text"))
        loaded = self.store.load("s1")
        self.assertIsNone(loaded.preferences)
        self.assertIsNone(loaded.selected_package)

    def test_clearing_a_part_deletes_its_blob(self):
        state = AppState("s1", preferences=prefs(), generated_packages=[_package()])
        self.store.save(state)
        state.generated_packages = []
        self.store.save(state)
        self.assertEqual(self.store.load("s1").generated_packages, [])

    def test_sessions_do_not_share_state(self):
        self.store.save(AppState("s1", preferences=prefs()))
        self.assertIsNone(self.store.load("s2").preferences)


class RedisStateStoreTests(unittest.TestCase):
    def setUp(self):
        self.blobs = {}
        patches = [
            patch("wahotrip.modules.state.app_state.redis_client.get_blob",
                  side_effect=lambda name, sid: self.blobs.get(f"{name}:{sid}")),
            patch("wahotrip.modules.state.app_state.redis_client.set_blob",
                  side_effect=lambda name, sid, payload: self.blobs.__setitem__(f"{name}:{sid}", payload)),
            patch("wahotrip.modules.state.app_state.redis_client.delete_blob",
                  side_effect=lambda name, sid: self.blobs.pop(f"{name}:{sid}", None)),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)
        self.store = RedisStateStore()

    def test_blob_keys(self):
        self.store.save(AppState("abc", preferences=prefs()))
        self.assertEqual(list(self.blobs), ["travelFormData:abc"])
        self.assertEqual(json.loads(self.blobs["travelFormData:abc"])["tripDuration"], "5")

    def test_round_trip_and_delete(self):
        state = AppState("abc", preferences=prefs(), generated_packages=[_package()])
        self.store.save(state)
        self.assertIn("generatedPackages:abc", self.blobs)

        state.generated_packages = []
        self.store.save(state)
        self.assertNotIn("generatedPackages:abc", self.blobs)
        self.assertEqual(self.store.load("abc").preferences, prefs())

    def test_malformed_blob_loads_as_absent(self):
        self.blobs["selectedPackage:abc"] = "<<<"
        self.assertIsNone(self.store.load("abc").selected_package)


if __name__ == "__main__":
    unittest.main()
