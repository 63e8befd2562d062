import os
import tempfile
import unittest
from datetime import datetime, timedelta, timezone

from app.store import SqliteDataStore, StoreError


class SqliteDataStoreTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.tmpdir.name, "nested", "store.db")
        self.store = SqliteDataStore(self.db_path)
        self.now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def tearDown(self):
        self.store.close()
        self.tmpdir.cleanup()

    def test_creates_parent_directory(self):
        self.assertTrue(os.path.exists(self.db_path))

    def test_job_round_trip_keeps_skill_order(self):
        self.store.add_job(
            {
                "id": 42,
                "title": "Data Engineer",
                "company": "Acme",
                "skills": ["Spark", "Airflow", "SQL"],
                "salary_min": 70000,
                "salary_max": 95000,
                "location_type": "Remote",
            }
        )
        job = self.store.get_job("42")
        self.assertEqual(job.id, "42")
        self.assertEqual(job.skills, ["Spark", "Airflow", "SQL"])
        self.assertEqual(job.salary_max, 95000)
        self.assertEqual(job.location_type, "Remote")
        self.assertIsNone(self.store.get_job("missing"))

    def test_resumes_are_listed_in_insertion_order(self):
        for resume_id in ("c", "a", "b"):
            self.store.add_resume({"id": resume_id, "full_name": resume_id.upper(), "skills": "python, sql"})
        resumes = self.store.list_resumes()
        self.assertEqual([r.id for r in resumes], ["c", "a", "b"])
        self.assertEqual(resumes[0].skills, "python, sql")

    def test_non_string_skill_entries_are_kept(self):
        self.store.add_job({"id": "job-1", "skills": ["SQL", 7, None]})
        self.store.add_resume({"id": "r1", "skills": [None, "SQL", 7]})
        self.assertEqual(self.store.get_job("job-1").skills, ["SQL", 7, None])
        self.assertEqual(self.store.list_resumes()[0].skills, [None, "SQL", 7])

    def test_invalid_rows_are_rejected_before_writing(self):
        with self.assertRaises(StoreError):
            self.store.add_resume({"id": "r1", "created_at": "not a date"})
        with self.assertRaises(StoreError):
            self.store.add_job({"id": "job-1", "updated_at": "not a date"})
        self.assertEqual(self.store.list_resumes(), [])
        self.assertIsNone(self.store.get_job("job-1"))

    def test_scalar_skills_json_is_read_as_text(self):
        self.store._conn.execute(
            "INSERT INTO resumes (id, skills_json, created_at, updated_at) VALUES (?, ?, ?, ?)",
            ("r1", "7", self.now.isoformat(), self.now.isoformat()),
        )
        self.assertEqual(self.store.list_resumes()[0].skills, "7")

    def test_upsert_keeps_one_record_per_pair(self):
        first = self.store.upsert_match(
            job_id="job-1",
            resume_id="resume-1",
            match_percentage=40,
            match_explanation="first",
            updated_at=self.now,
        )
        second = self.store.upsert_match(
            job_id="job-1",
            resume_id="resume-1",
            match_percentage=70,
            match_explanation="second",
            updated_at=self.now + timedelta(hours=1),
        )
        self.assertEqual(first.id, second.id)
        records = self.store.list_matches_for_job("job-1")
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].match_percentage, 70)
        self.assertEqual(records[0].match_explanation, "second")
        self.assertEqual(records[0].updated_at, self.now + timedelta(hours=1))

    def test_duplicate_insert_is_rejected(self):
        kwargs = dict(
            job_id="job-1",
            resume_id="resume-1",
            match_percentage=10,
            match_explanation="",
            updated_at=self.now,
        )
        self.store.insert_match(**kwargs)
        with self.assertRaises(StoreError):
            self.store.insert_match(**kwargs)

    def test_update_unknown_record_raises(self):
        with self.assertRaises(StoreError):
            self.store.update_match("nope", match_percentage=1, match_explanation="", updated_at=self.now)

    def test_listings_are_ordered_by_percentage(self):
        for resume_id, percentage in (("r1", 20), ("r2", 90), ("r3", 50)):
            self.store.insert_match(
                job_id="job-1",
                resume_id=resume_id,
                match_percentage=percentage,
                match_explanation="",
                updated_at=self.now,
            )
        self.store.insert_match(
            job_id="job-2",
            resume_id="r1",
            match_percentage=95,
            match_explanation="",
            updated_at=self.now,
        )
        self.assertEqual([m.resume_id for m in self.store.list_matches_for_job("job-1")], ["r2", "r3", "r1"])
        self.assertEqual([m.job_id for m in self.store.list_matches_for_resume("r1")], ["job-2", "job-1"])
        self.assertEqual(self.store.delete_matches_for_job("job-1"), 3)
        self.assertEqual(self.store.list_matches_for_job("job-1"), [])
        self.assertIsNotNone(self.store.get_match("job-2", "r1"))


class SeedStoreTests(unittest.TestCase):
    def test_seed_loads_jobs_and_resumes_and_resets_matches(self):
        from scripts.seed_store import seed

        store = SqliteDataStore(":memory:")
        store.insert_match(
            job_id="job-1",
            resume_id="r1",
            match_percentage=50,
            match_explanation="",
            updated_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        )
        payload = {
            "jobs": [{"id": "job-1", "title": "Engineer", "skills": ["Go"]}],
            "resumes": [{"id": "r1", "skills": ["go"]}, {"id": "r2", "skills": "rust"}],
        }
        self.assertEqual(seed(store, payload, reset_matches=True), (1, 2))
        self.assertEqual(store.get_job("job-1").title, "Engineer")
        self.assertEqual([r.id for r in store.list_resumes()], ["r1", "r2"])
        self.assertEqual(store.list_matches_for_job("job-1"), [])
        store.close()


if __name__ == "__main__":
    unittest.main()
