"""
どこで: `src/metascan/demos/repeatable.py`。
何を: 1 メソッドに 2 回付けた Task を宣言順に取り出して表示する。
なぜ: repeatable kind がコンテナ型なしで宣言順に集約されることを示すため。
"""

from __future__ import annotations

import logging

from metascan.core.runtime_config import runtime_config
from metascan.core.scanner import TypeScanReport, scan_type
from metascan.export.console import print_report

from .kinds import Task


class MyTasks:
    @Task(description="Task 1", priority=3)
    @Task(description="Task 2", priority=2)
    def perform_multiple_tasks(self) -> None:
        print("Performing multiple tasks.")


def task_lines(report: TypeScanReport) -> list[str]:
    """発見した Task を 1 行ずつの説明文にして返す。"""

    lines: list[str] = []
    for finding in report.findings:
        for task in finding.get(Task.name):
            lines.append(f"Task: {task['description']} with priority: {task['priority']}")
    return lines


def main() -> None:
    logging.basicConfig(level=runtime_config().log_level)
    report = scan_type(MyTasks, {Task})
    for line in task_lines(report):
        print(line)
    print_report(report)


if __name__ == "__main__":
    main()
