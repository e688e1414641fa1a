import io
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from srcmd.cli import main
from srcmd.parse import decode_file

EXAMPLE = Path(__file__).resolve().parents[1] / "examples" / "add.src.md"


def run(argv):
    out, err = io.StringIO(), io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        rc = main(argv)
    return rc, out.getvalue(), err.getvalue()


class TestCLISmoke(unittest.TestCase):
    def test_cli_info_smoke(self):
        rc, out, _ = run(["info", str(EXAMPLE)])
        self.assertEqual(rc, 0)
        self.assertIn("language: typescript", out)
        self.assertIn("title: Adding numbers", out)
        self.assertIn("code: 2", out)
        self.assertIn("- add.ts", out)

    def test_cli_fmt_check_example(self):
        rc, out, _ = run(["fmt", "--check", str(EXAMPLE)])
        self.assertEqual(rc, 0)
        self.assertIn("Already formatted", out)

    def test_cli_fmt_rewrites(self):
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "messy.src.md"
            p.write_text('<!-- srcbook:{"language":"javascript"} -->\n# T\nnotes\n\n\nmore\n', encoding="utf-8")
            rc, _, _ = run(["fmt", "--check", str(p)])
            self.assertEqual(rc, 1)
            rc, _, _ = run(["fmt", str(p)])
            self.assertEqual(rc, 0)
            self.assertEqual(
                p.read_text(encoding="utf-8"),
                '<!-- srcbook:{"language":"javascript"} -->\n\n# T\n\nnotes\nmore\n\n',
            )

    def test_cli_new_add_lint(self):
        with tempfile.TemporaryDirectory() as td:
            nb_path = Path(td) / "nb.src.md"
            src = Path(td) / "greet.ts"
            src.write_text("export const greet = (n: string) => `hi ${n}`;\n", encoding="utf-8")

            rc, _, _ = run(["new", str(nb_path), "--title", "Greeter"])
            self.assertEqual(rc, 0)
            rc, _, err = run(["new", str(nb_path), "--title", "Again"])
            self.assertEqual(rc, 1)
            self.assertIn("already exists", err)

            rc, out, _ = run(["add", str(nb_path), str(src), "--heading", "Greeting"])
            self.assertEqual(rc, 0)
            self.assertIn("Added: greet.ts", out)

            nb = decode_file(str(nb_path))
            self.assertEqual(nb.language, "typescript")
            self.assertEqual([c.type for c in nb.cells], ["title", "manifest", "markdown", "code"])
            self.assertEqual(nb.cells[2].text, "## Greeting")
            self.assertEqual(nb.cells[3].source, "export const greet = (n: string) => `hi ${n}`;")

            rc, out, _ = run(["lint", str(nb_path)])
            self.assertEqual(rc, 0)
            self.assertIn("OK: no lint errors", out)

            # same filename twice is refused
            rc, _, err = run(["add", str(nb_path), str(src)])
            self.assertEqual(rc, 1)

    def test_cli_add_generates_filename(self):
        with tempfile.TemporaryDirectory() as td:
            nb_path = Path(td) / "nb.src.md"
            src = Path(td) / "my script.txt"
            src.write_text("console.log(1);\n", encoding="utf-8")
            run(["new", str(nb_path), "--title", "T", "--language", "javascript"])
            rc, _, _ = run(["add", str(nb_path), str(src), "--heading", "Say Hello"])
            self.assertEqual(rc, 0)
            code = decode_file(str(nb_path)).code_cells()[0]
            self.assertTrue(code.filename.startswith("say-hello-"))
            self.assertTrue(code.filename.endswith(".js"))
            self.assertEqual(code.language, "javascript")

    def test_cli_lint_reports_errors(self):
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "bad.src.md"
            p.write_text(
                '<!-- srcbook:{"language":"typescript"} -->\n\n###### a.js\n\n```typescript\n1;\n```\n',
                encoding="utf-8",
            )
            rc, out, _ = run(["lint", str(p)])
            self.assertEqual(rc, 1)
            self.assertIn("ERROR: a.js: extension not valid for typescript", out)

    def test_cli_strict_config_fails_on_warnings(self):
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "warn.src.md"
            p.write_text(
                '<!-- srcbook:{"language":"typescript"} -->\n\nintro\n\n# Late title\n',
                encoding="utf-8",
            )
            cfg = Path(td) / "srcmd.yaml"
            cfg.write_text("strict: true\n", encoding="utf-8")
            rc, out, _ = run(["lint", str(p)])
            self.assertEqual(rc, 0)
            rc, out, _ = run(["--config", str(cfg), "lint", str(p)])
            self.assertEqual(rc, 1)
            self.assertIn("WARN: Title is not the first cell", out)

    def test_cli_missing_metadata(self):
        with tempfile.TemporaryDirectory() as td:
            p = Path(td) / "plain.md"
            p.write_text("# Just markdown\n", encoding="utf-8")
            rc, _, err = run(["info", str(p)])
            self.assertEqual(rc, 1)
            self.assertIn("ERROR: Missing srcbook metadata", err)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
