from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List, Optional

from ecs_notifier.bootstrap import build_pipeline
from ecs_notifier.notification.base import PrintNotifier

USAGE = "usage: python -m ecs_notifier.dev.run_notifier [--config PATH] [--dry-run] EVENT_JSON"


def main(argv: Optional[List[str]] = None) -> int:
    """
    Replay a saved event through the notification pipeline.

    Notes
    -----
    - EVENT_JSON holds either an SNS event (``{"Records": [...]}``) or a bare
      CodeDeploy trigger message.
    - ``--dry-run`` prints the composed Slack message instead of posting it.
    - Optional CLI usage:
        python -m ecs_notifier.dev.run_notifier --config config.yaml event.json
    """
    args = list(sys.argv[1:] if argv is None else argv)

    config_path = None
    if "--config" in args:
        i = args.index("--config")
        if i + 1 >= len(args):
            print(USAGE, file=sys.stderr)
            return 2
        config_path = args[i + 1]
        del args[i:i + 2]

    dry_run = "--dry-run" in args
    if dry_run:
        args.remove("--dry-run")

    if len(args) != 1:
        print(USAGE, file=sys.stderr)
        return 2

    text = Path(args[0]).read_text(encoding="utf-8")
    pipeline = build_pipeline(config_path, notifier=PrintNotifier() if dry_run else None)

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = None  # process_message reports it as a malformed envelope

    if isinstance(data, dict) and "Records" in data:
        report = pipeline.process_sns_event(data)
        return 0 if report.ok else 1

    pipeline.process_message(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
