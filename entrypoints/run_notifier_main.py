import runpy
import traceback


def main():
    try:
        # Equivalent to: python -m ecs_notifier.dev.run_notifier <args>
        runpy.run_module("ecs_notifier.dev.run_notifier", run_name="__main__")
    except SystemExit:
        raise
    except Exception:
        traceback.print_exc()
        raise SystemExit(1)


if __name__ == "__main__":
    main()
