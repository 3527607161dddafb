import time

from devserver_toolbar.config import load_config
from devserver_toolbar.monitor import DevServerMonitor


def main() -> None:
    config = load_config()
    monitor = DevServerMonitor(config)

    t0 = time.perf_counter()
    entries = monitor.poll()
    first_elapsed = time.perf_counter() - t0

    print(f"first poll: {first_elapsed:.3f}s, servers={len(monitor.processes)}, ports={len(entries)}")

    t1 = time.perf_counter()
    monitor.poll()
    second_elapsed = time.perf_counter() - t1
    print(f"second poll: {second_elapsed:.3f}s (cached pids={len(monitor.store)})")

    for entry in entries:
        print(f"  {entry.port} → {entry.title} pids={entry.pids} cwd={entry.cwd or '?'}")


if __name__ == "__main__":
    main()
