#!/usr/bin/env python3
"""
GC Emulator Console
===================

Console driver for the mark-and-sweep emulator: renders heap status,
plays the demonstration scenario and runs the interactive command loop.

Usage:
    gcemulator [options]

Options:
    --capacity N       Heap capacity in bytes (default 1000)
    --mode MODE        automatic or manual collection
    --no-demo          Skip the demonstration scenario
    --no-interactive   Skip the interactive command loop
    --json             Print only status and collection reports, as JSON
"""

import argparse
import json
import sys
from typing import Callable, Optional, TextIO

from .gc_core import MemoryManager, GCConfiguration, GCMode
from .collector import CollectionTrigger, GCReport
from .object_model import HeapSnapshot
from .errors import HeapError, OutOfMemoryError

BAR_CELLS = 20

MENU = """Commands:
  1 - Allocate object
  2 - Add reference
  3 - Remove root
  4 - Run GC
  5 - Show status
  0 - Exit
"""


def render_status(snapshot: HeapSnapshot) -> str:
    """Render a heap snapshot as a human-readable block of text"""
    lines = [
        "┌─────────────────────────────────┐",
        "│         📊 HEAP STATUS          │",
        "└─────────────────────────────────┘",
        f"Used: {snapshot.used} / {snapshot.capacity} bytes",
        f"Objects in heap: {snapshot.object_count}",
        f"Root objects: {snapshot.root_count}",
    ]

    usage = snapshot.utilization
    bars = min(int(usage / (100 / BAR_CELLS)), BAR_CELLS)
    lines.append(f"Fill: [{'█' * bars}{'░' * (BAR_CELLS - bars)}] {usage:.1f}%")

    if snapshot.objects:
        lines.append("")
        lines.append("Objects in memory:")
        for obj in snapshot.objects:
            refs = ", ".join(str(ref) for ref in obj.references)
            root_mark = " 🌳 root" if obj.is_root else ""
            lines.append(f"  • ID={obj.object_id} | size={obj.size} | refs=[{refs}]{root_mark}")

    return "\n".join(lines) + "\n"


def render_report(report: GCReport) -> str:
    """Render the outcome of one collection cycle"""
    lines = [
        "╔════════════════════════════════════════╗",
        "║   🔄 GARBAGE COLLECTION (Mark&Sweep)   ║",
        "╚════════════════════════════════════════╝",
        "MARK phase: marking reachable objects",
    ]
    for object_id in report.marked_ids:
        lines.append(f"   ✓ Marked object ID={object_id}")

    lines.append("SWEEP phase: removing unreachable objects")
    if report.removed_ids:
        for object_id, size in zip(report.removed_ids, report.removed_sizes):
            lines.append(f"   🗑️  Removed object ID={object_id} ({size} bytes)")
        lines.append(f"   {report.removed_count} object(s), {report.removed_bytes} bytes reclaimed")
    else:
        lines.append("   ℹ️  No garbage found")

    lines.append("Garbage collection finished!")
    return "\n".join(lines) + "\n"


class ConsoleDriver:
    """
    Presents a MemoryManager on a text stream.

    Registers itself as a collection listener so that collections
    triggered by allocation pressure are reported as well.
    """

    def __init__(self, manager: MemoryManager, out: Optional[TextIO] = None,
                 json_output: bool = False):
        self.manager = manager
        self.out = out if out is not None else sys.stdout
        self.json_output = json_output
        self.manager.add_collection_listener(self._on_collection)

    def _print(self, text: str = ""):
        print(text, file=self.out)

    def _message(self, text: str = ""):
        """Print a human-readable progress line; silent in JSON mode"""
        if not self.json_output:
            self._print(text)

    def _on_collection(self, report: GCReport):
        if self.json_output:
            self._print(json.dumps(report.to_dict(), indent=2))
            return

        if report.trigger == CollectionTrigger.ALLOCATION_PRESSURE:
            self._print("Not enough memory! Running garbage collector...")
        self._print(render_report(report))

    def show_status(self):
        snapshot = self.manager.query_status()
        if self.json_output:
            self._print(json.dumps(snapshot.to_dict(), indent=2))
        else:
            self._print(render_status(snapshot))

    def allocate(self, size: int, as_root: bool) -> Optional[int]:
        try:
            obj = self.manager.allocate(size, as_root)
        except OutOfMemoryError as e:
            self._message(f"❌ Out of memory: {e.message}")
            return None
        except HeapError as e:
            self._message(f"❌ {e.message}")
            return None

        root_mark = " (root)" if as_root else ""
        self._message(f"✅ Allocated object ID={obj.object_id} of {size} bytes{root_mark}")
        return obj.object_id

    def add_reference(self, from_id: int, to_id: int) -> bool:
        if self.manager.add_reference(from_id, to_id):
            self._message(f"🔗 Added reference: object {from_id} → object {to_id}")
            return True

        self._message(f"❌ Reference not added: object {from_id} or {to_id} does not exist")
        return False

    def remove_root(self, object_id: int) -> bool:
        if self.manager.remove_root(object_id):
            self._message(f"🗑️  Removed root: object {object_id}")
            return True

        self._message(f"ℹ️  Object {object_id} is not a root")
        return False

    def run_demo(self):
        """Play the scripted demonstration scenario"""
        self._message("🎬 Running demonstration scenario...\n")

        obj1 = self.allocate(100, True)
        obj2 = self.allocate(150, True)
        obj3 = self.allocate(200, False)
        obj4 = self.allocate(80, False)
        obj5 = self.allocate(120, False)
        self._message()

        self.add_reference(obj1, obj3)
        self.add_reference(obj2, obj4)
        self.add_reference(obj3, obj5)
        self.show_status()

        # obj2 becomes unreachable together with obj4
        self.remove_root(obj2)
        self.show_status()

        # Does not fit: triggers a collection that reclaims obj2 and obj4
        self.allocate(400, True)
        self.show_status()

        self.remove_root(obj1)
        self.show_status()

        # Reclaims obj1, obj3 and obj5
        self.manager.garbage_collect()
        self.show_status()

        self._message("✅ Demonstration complete!\n")

    def run_interactive(self, input_fn: Callable[[str], str] = input):
        """Run the numbered command loop until 0 or end of input"""
        session = InteractiveSession(self, input_fn)
        session.run()


class InteractiveSession:
    """Numbered-command loop reading from an input function"""

    def __init__(self, driver: ConsoleDriver, input_fn: Callable[[str], str] = input):
        self.driver = driver
        self.input_fn = input_fn

    def _read_int(self, prompt: str) -> int:
        return int(self.input_fn(prompt).strip())

    def run(self):
        self.driver._message("🎮 Interactive mode\n")

        while True:
            self.driver._message(MENU)
            try:
                if not self.step(self._read_int("Choose a command: ")):
                    break
            except EOFError:
                break
            except ValueError:
                self.driver._message("❌ Please enter a number\n")

        self.driver._message("👋 Exiting...")

    def step(self, choice: int) -> bool:
        """Execute one command; returns False when the loop should stop"""
        driver = self.driver

        if choice == 1:
            size = self._read_int("Object size (bytes): ")
            as_root = self._read_int("Make it a root? (1-yes, 0-no): ") == 1
            driver.allocate(size, as_root)
        elif choice == 2:
            from_id = self._read_int("Source object ID: ")
            to_id = self._read_int("Target object ID: ")
            driver.add_reference(from_id, to_id)
        elif choice == 3:
            driver.remove_root(self._read_int("Root object ID: "))
        elif choice == 4:
            driver.manager.garbage_collect()
        elif choice == 5:
            driver.show_status()
        elif choice == 0:
            return False
        else:
            driver._message("❌ Unknown command\n")

        return True


def main(argv=None, input_fn: Callable[[str], str] = input, out: Optional[TextIO] = None) -> int:
    """Main entry point"""
    parser = argparse.ArgumentParser(
        prog="gcemulator",
        description="Mark-and-sweep garbage collector emulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    gcemulator                              # Demo, then interactive mode
    gcemulator --no-demo --capacity 4096    # Interactive mode on a 4 KB heap
    gcemulator --no-interactive --json      # Demo with JSON output
        """
    )

    parser.add_argument('--capacity', type=int, default=1000,
                        help='Heap capacity in bytes (default: 1000)')
    parser.add_argument('--mode', choices=[m.name.lower() for m in GCMode], default='automatic',
                        help='Collect automatically on allocation pressure, or only on request')
    parser.add_argument('--no-demo', action='store_true',
                        help='Skip the demonstration scenario')
    parser.add_argument('--no-interactive', action='store_true',
                        help='Skip the interactive command loop')
    parser.add_argument('--json', action='store_true',
                        help='Print only status and collection reports, as JSON documents')

    args = parser.parse_args(argv)

    try:
        config = GCConfiguration(capacity=args.capacity, mode=GCMode[args.mode.upper()])
    except HeapError as e:
        parser.error(str(e))

    driver = ConsoleDriver(MemoryManager(config), out=out, json_output=args.json)

    if not args.no_demo:
        driver.run_demo()
    if not args.no_interactive:
        driver.run_interactive(input_fn)

    return 0


if __name__ == "__main__":
    sys.exit(main())
