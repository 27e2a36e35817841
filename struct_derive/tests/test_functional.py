import json
import unittest
from pathlib import Path
from unittest import TestCase

from struct_derive.pipeline import Deriver, TypeDefRenderer

TEST_DATA = Path(__file__).parent / "test_data"


def derive_job(name):
    with open(TEST_DATA / f"{name}.json") as f:
        job = json.load(f)

    results = Deriver(job["base"]).derive_all(job["derive"])
    return TypeDefRenderer().render_results(results, f"struct_derive {name}.json {name}.rs")


class TestReferenceFiles(TestCase):
    def check(self, name):
        out = derive_job(name)
        with open(TEST_DATA / f"{name}.rs") as f:
            ref = f.read()
        self.assertEqual(out, ref)

    def test_person(self):
        self.check("person")

    def test_shapes(self):
        self.check("shapes")


if __name__ == "__main__":
    unittest.main()
