import json
import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from srcmd.fmt import format_manifest_source, format_text
from srcmd.parse import MissingMetadata, decode

EXAMPLE = Path(__file__).resolve().parents[1] / "examples" / "add.src.md"


class TestFmt(unittest.TestCase):
    def test_manifest_key_ordering_and_idempotence(self):
        text = (
            '<!-- srcbook:{"language":"javascript"} -->\n\n'
            "# Sample\n\n"
            "###### package.json\n\n"
            '```json\n{"zeta": 1, "dependencies": {"lodash": "^4"}, "type": "module", "name": "sample"}\n```\n\n'
            "Some notes.\n\n\n\nMore notes.\n"
        )
        formatted1 = format_text(text)
        formatted2 = format_text(formatted1)
        self.assertEqual(formatted1, formatted2)

        cells = decode(formatted2).unwrap().cells
        manifest = cells[1]
        self.assertEqual(list(json.loads(manifest.source).keys()), ["name", "type", "dependencies", "zeta"])
        self.assertTrue(manifest.source.startswith('{\n  "name": "sample"'))
        self.assertEqual(cells[2].text, "Some notes.\nMore notes.")

    def test_example_is_already_formatted(self):
        text = EXAMPLE.read_text(encoding="utf-8")
        self.assertEqual(format_text(text), text)

    def test_unparseable_manifest_untouched(self):
        self.assertEqual(format_manifest_source("{oops"), "{oops")
        self.assertEqual(format_manifest_source("[1, 2]"), "[1, 2]")

    def test_missing_metadata_raises(self):
        with self.assertRaises(MissingMetadata):
            format_text("# no marker\n")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
