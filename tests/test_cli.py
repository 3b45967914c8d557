"""
Test suite for the console driver.

Author: xwest
"""

import io
import json
import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from gcemulator import MemoryManager
from gcemulator.cli import ConsoleDriver, render_status, main


def scripted_input(*answers):
    """Input function replaying answers, then signalling end of input"""
    remaining = list(answers)

    def input_fn(prompt=""):
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return input_fn


class TestRenderStatus(unittest.TestCase):
    """Test cases for status rendering."""

    def test_empty_heap(self):
        text = render_status(MemoryManager(capacity=1000).query_status())

        self.assertIn("Used: 0 / 1000 bytes", text)
        self.assertIn("Objects in heap: 0", text)
        self.assertIn("[" + "░" * 20 + "] 0.0%", text)
        self.assertNotIn("Objects in memory", text)

    def test_objects_and_fill_bar(self):
        manager = MemoryManager(capacity=1000)
        a = manager.allocate(300, as_root=True).object_id
        b = manager.allocate(230).object_id
        manager.add_reference(a, b)

        text = render_status(manager.query_status())

        self.assertIn("Used: 530 / 1000 bytes", text)
        self.assertIn("Root objects: 1", text)
        self.assertIn("[" + "█" * 10 + "░" * 10 + "] 53.0%", text)
        self.assertIn("• ID=0 | size=300 | refs=[1] 🌳 root", text)
        self.assertIn("• ID=1 | size=230 | refs=[]\n", text)

    def test_full_heap(self):
        manager = MemoryManager(capacity=10)
        manager.allocate(10)

        self.assertIn("[" + "█" * 20 + "] 100.0%", render_status(manager.query_status()))


class TestConsoleDriver(unittest.TestCase):
    """Test cases for the demo and interactive mode."""

    def setUp(self):
        self.out = io.StringIO()
        self.manager = MemoryManager(capacity=1000)
        self.driver = ConsoleDriver(self.manager, out=self.out)

    def test_demo_scenario(self):
        self.driver.run_demo()
        output = self.out.getvalue()

        self.assertIn("Not enough memory! Running garbage collector...", output)
        self.assertIn("Removed object ID=1 (150 bytes)", output)
        self.assertIn("Removed object ID=3 (80 bytes)", output)
        self.assertIn("2 object(s), 230 bytes reclaimed", output)
        self.assertIn("Allocated object ID=5 of 400 bytes (root)", output)
        self.assertIn("Demonstration complete!", output)

        status = self.manager.query_status()
        self.assertEqual(status.object_ids(), [5])
        self.assertEqual(status.used, 400)

        stats = self.manager.get_statistics()
        self.assertEqual(stats.total_collections, 2)
        self.assertEqual(stats.automatic_collections, 1)
        self.assertEqual(stats.bytes_collected, 230 + 420)

    def test_interactive_session(self):
        self.driver.run_interactive(scripted_input(
            "1", "100", "1",
            "1", "50", "0",
            "2", "0", "1",
            "2", "0", "9",
            "3", "0",
            "4",
            "5",
            "abc",
            "9",
            "0",
        ))
        output = self.out.getvalue()

        self.assertIn("Allocated object ID=0 of 100 bytes (root)", output)
        self.assertIn("Added reference: object 0 → object 1", output)
        self.assertIn("Reference not added", output)
        self.assertIn("Removed root: object 0", output)
        self.assertIn("Used: 0 / 1000 bytes", output)
        self.assertIn("Please enter a number", output)
        self.assertIn("Unknown command", output)
        self.assertTrue(output.rstrip().endswith("Exiting..."))

    def test_interactive_out_of_memory(self):
        self.driver.run_interactive(scripted_input("1", "900", "1", "1", "200", "0", "1", "0", "1"))
        output = self.out.getvalue()

        self.assertIn("Out of memory: cannot allocate", output)
        self.assertIn("invalid allocation size", output)
        self.assertEqual(self.manager.used, 900)

    def test_interactive_stops_at_end_of_input(self):
        self.driver.run_interactive(scripted_input("5"))

        self.assertIn("Exiting...", self.out.getvalue())


class TestMain(unittest.TestCase):
    """Test cases for the command-line entry point."""

    def test_demo_only(self):
        out = io.StringIO()
        self.assertEqual(main(['--no-interactive'], out=out), 0)
        self.assertIn("Demonstration complete!", out.getvalue())

    def test_json_output(self):
        out = io.StringIO()
        main(['--no-interactive', '--json'], out=out)

        output = out.getvalue()
        self.assertIn('"trigger": "ALLOCATION_PRESSURE"', output)
        self.assertIn('"capacity": 1000', output)

    def test_json_output_is_only_json_documents(self):
        out = io.StringIO()
        main(['--no-interactive', '--json'], out=out)

        decoder = json.JSONDecoder()
        text = out.getvalue()
        documents = []
        position = 0
        while True:
            while position < len(text) and text[position].isspace():
                position += 1
            if position == len(text):
                break
            document, position = decoder.raw_decode(text, position)
            documents.append(document)

        # Five status blocks and two collection reports
        self.assertEqual(len(documents), 7)
        reports = [d for d in documents if 'trigger' in d]
        self.assertEqual(reports[0]['removed_ids'], [1, 3])
        self.assertEqual(reports[0]['removed_sizes'], [150, 80])
        self.assertNotIn("Allocated object", text)

    def test_manual_mode_demo(self):
        out = io.StringIO()
        main(['--no-interactive', '--mode', 'manual'], out=out)

        self.assertIn("Out of memory: cannot allocate", out.getvalue())

    def test_interactive_only(self):
        out = io.StringIO()
        main(['--no-demo', '--capacity', '64'], input_fn=scripted_input("1", "64", "0", "0"), out=out)

        self.assertIn("Allocated object ID=0 of 64 bytes", out.getvalue())
        self.assertNotIn("demonstration", out.getvalue().lower())

    def test_invalid_capacity(self):
        with self.assertRaises(SystemExit):
            main(['--capacity', '0', '--no-demo', '--no-interactive'], out=io.StringIO())


if __name__ == '__main__':
    unittest.main()
