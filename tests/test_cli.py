from __future__ import annotations

import json
import os
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]


def run_cli(*args: str, env: dict[str, str] | None = None) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        [sys.executable, '-m', 'smgen.cli', *args],
        cwd=PROJECT_ROOT,
        env={**os.environ, **env} if env else None,
        text=True,
        capture_output=True,
        check=False,
    )


class CLITests(unittest.TestCase):
    def test_identity_map_to_stdout(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'in.js'
            path.write_text('a = b;\n', encoding='utf-8')
            result = run_cli('identity', str(path), '--file', 'out.js', '--names')
        self.assertEqual(result.returncode, 0)
        payload = json.loads(result.stdout)
        self.assertEqual(payload['version'], 3)
        self.assertEqual(payload['file'], 'out.js')
        self.assertEqual(payload['names'], ['a', 'b'])

    def test_identity_map_to_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            source = Path(tmp) / 'in.js'
            source.write_text('x;', encoding='utf-8')
            output = Path(tmp) / 'in.js.map'
            result = run_cli('identity', str(source), '--no-content', '-o', str(output))
            payload = json.loads(output.read_text(encoding='utf-8'))
        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout, '')
        self.assertNotIn('sourcesContent', payload)

    def test_identity_reads_environment_defaults(self) -> None:
        env = {'SMGEN_FILE': 'env.js', 'SMGEN_SOURCE_ROOT': 'lib'}
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'in.js'
            path.write_text('a;', encoding='utf-8')
            from_env = run_cli('identity', str(path), '--no-content', env=env)
            overridden = run_cli('identity', str(path), '--no-content', '--file', 'out.js', env=env)
        self.assertEqual(from_env.returncode, 0)
        payload = json.loads(from_env.stdout)
        self.assertEqual(payload['file'], 'env.js')
        self.assertEqual(payload['sourceRoot'], 'lib')
        self.assertEqual(json.loads(overridden.stdout)['file'], 'out.js')

    def test_verbose_logs_to_stderr(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'in.js'
            path.write_text('a;', encoding='utf-8')
            result = run_cli('--verbose', 'identity', str(path))
        self.assertEqual(result.returncode, 0)
        self.assertIn('DEBUG', result.stderr)
        self.assertEqual(json.loads(result.stdout)['version'], 3)

    def test_missing_input_exit_code(self) -> None:
        result = run_cli('identity', 'does/not/exist.js')
        self.assertEqual(result.returncode, 1)
        self.assertIn('CLI002', result.stderr)

    def test_vlq_encode_and_decode(self) -> None:
        result = run_cli('vlq', 'encode', '0', '16', '-1')
        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout.strip(), 'AgBD')

        result = run_cli('vlq', 'decode', 'AAgBC')
        self.assertEqual(result.returncode, 0)
        self.assertEqual(json.loads(result.stdout), [0, 0, 16, 1])

    def test_vlq_decode_error(self) -> None:
        result = run_cli('vlq', 'decode', 'g')
        self.assertEqual(result.returncode, 1)
        self.assertIn('VLQ002', result.stderr)

    def test_url_commands(self) -> None:
        result = run_cli('url', 'relative', 'http://host/a/b/', 'http://host/a/c')
        self.assertEqual(result.stdout.strip(), '../c')

        result = run_cli('url', 'join', 'a/b', '../c')
        self.assertEqual(result.stdout.strip(), 'a/c')

        result = run_cli('url', 'source', '/file.js', '--root', 'root')
        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout.strip(), 'root/file.js')


if __name__ == '__main__':
    unittest.main()
