from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Dict, List, Optional

import rumps

try:
    import AppKit
    from Foundation import NSBundle
except ImportError:  # pragma: no cover - macOS only integration
    AppKit = None
    NSBundle = None

if __package__ in (None, ""):
    # Handle execution as a top-level script inside the py2app bundle.
    from devserver_toolbar.actions import (
        ActionError,
        open_in_browser,
        open_repository,
        stop_server,
    )
    from devserver_toolbar.config import CONFIG_PATH, ToolbarConfig, load_config, save_config
    from devserver_toolbar.menu import detail_rows, menu_bar_title
    from devserver_toolbar.models import ServerEntry
    from devserver_toolbar.monitor import DevServerMonitor
    from devserver_toolbar.utils import format_port_range
else:
    from .actions import ActionError, open_in_browser, open_repository, stop_server
    from .config import CONFIG_PATH, ToolbarConfig, load_config, save_config
    from .menu import detail_rows, menu_bar_title
    from .models import ServerEntry
    from .monitor import DevServerMonitor
    from .utils import format_port_range

APP_NAME = "Dev Server Monitor"
ICON_PATH = Path(__file__).resolve().parent / "assets" / "devserver_toolbar_icon.png"
ICON_SERVER = "📦"
ICON_EMPTY = "⚪️"


def _load_icon_path() -> Optional[str]:
    if ICON_PATH.exists():
        return str(ICON_PATH)
    return None


class DevServerToolbarApp(rumps.App):
    def __init__(self, config: Optional[ToolbarConfig] = None):
        self.config = config or load_config()
        self.monitor = DevServerMonitor(self.config)

        super().__init__("", icon=_load_icon_path(), quit_button=None)

        self.servers_header_item = rumps.MenuItem("Running Servers", callback=None)
        self.refresh_item = rumps.MenuItem("Refresh Now", callback=self.refresh_now)
        self.open_config_item = rumps.MenuItem("Preferences…", callback=self.open_config)
        self.quit_item = rumps.MenuItem("Quit", callback=rumps.quit_application)

        self.entry_lookup: Dict[int, ServerEntry] = {}

        self.refresh_timer = rumps.Timer(self.refresh_timer_tick, self.config.refresh_interval)
        self.refresh_timer.start()
        self._initial_timer = rumps.Timer(self._initial_refresh, 0.1)
        self._initial_timer.start()

    # ------------------------------------------------------------------
    # Menu rendering
    # ------------------------------------------------------------------
    def refresh_timer_tick(self, _):
        entries = self.monitor.poll()
        self._render_menu(entries)

    def _initial_refresh(self, timer: rumps.Timer) -> None:
        timer.stop()
        self.refresh_timer_tick(None)

    def _render_menu(self, entries: List[ServerEntry]) -> None:
        self.menu.clear()
        self.entry_lookup.clear()
        count_text = menu_bar_title(len(self.monitor.processes))
        if self.icon is None:
            self.title = f"{ICON_SERVER} {count_text}" if count_text else ICON_EMPTY
        else:
            self.title = count_text

        if entries:
            self.menu.add(self.servers_header_item)
            for entry in entries:
                self.entry_lookup[entry.port] = entry
                self.menu.add(self._build_server_submenu(entry))
        else:
            self.menu.add(rumps.MenuItem("No dev servers detected", callback=None))
            hint = f"Start your dev server on ports {format_port_range(self.config.port_range)}"
            self.menu.add(rumps.MenuItem(hint, callback=None))

        self.menu.add(rumps.separator)
        self.menu.add(self.refresh_item)
        self.menu.add(self.open_config_item)
        self.menu.add(self.quit_item)

    def _build_server_submenu(self, entry: ServerEntry) -> rumps.MenuItem:
        submenu = rumps.MenuItem(f"{ICON_SERVER} {entry.title}")
        for row in detail_rows(entry):
            submenu.add(rumps.MenuItem(row, callback=None))
        submenu.add(rumps.separator)

        browser_item = rumps.MenuItem("Open in Browser", callback=self._on_open_browser)
        browser_item._port = entry.port  # type: ignore[attr-defined]
        submenu.add(browser_item)
        if entry.repository:
            repo_item = rumps.MenuItem("Open Repository", callback=self._on_open_repository)
            repo_item._port = entry.port  # type: ignore[attr-defined]
            submenu.add(repo_item)
        submenu.add(rumps.separator)

        for pid in entry.pids:
            stop_item = rumps.MenuItem(f"Stop Server (PID: {pid})", callback=self._on_stop_server)
            stop_item._pid = pid  # type: ignore[attr-defined]
            submenu.add(stop_item)
        return submenu

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------
    def refresh_now(self, _):
        self.refresh_timer_tick(None)

    def open_config(self, _):
        save_config(self.config)
        subprocess.run([
            self.config.open_command,
            str(CONFIG_PATH.parent),
        ], check=False)

    def _on_open_browser(self, sender: rumps.MenuItem):
        port = getattr(sender, "_port", None)
        if port is None:
            return
        try:
            open_in_browser(port, self.config.browser_host, self.config.open_command)
        except ActionError as exc:
            _notify_failure(exc)
            return
        rumps.notification(APP_NAME, f"Opening {self.config.browser_host}:{port}", "")

    def _on_open_repository(self, sender: rumps.MenuItem):
        entry = self.entry_lookup.get(getattr(sender, "_port", None))
        if entry is None or not entry.repository:
            return
        try:
            open_repository(entry.repository, self.config.open_command)
        except ActionError as exc:
            _notify_failure(exc)

    def _on_stop_server(self, sender: rumps.MenuItem):
        pid = getattr(sender, "_pid", None)
        if pid is None:
            return
        try:
            stop_server(pid)
        except ActionError as exc:
            _notify_failure(exc)
            return
        rumps.notification(APP_NAME, "Server stopped", f"PID {pid}")
        self.refresh_timer_tick(None)


def _notify_failure(exc: ActionError) -> None:
    rumps.notification(APP_NAME, exc.title, exc.message)


def main() -> None:
    if AppKit is not None and NSBundle is not None:
        info = NSBundle.mainBundle().infoDictionary()
        if info is not None:
            info["LSUIElement"] = "1"
        ns_app = AppKit.NSApplication.sharedApplication()
        ns_app.setActivationPolicy_(AppKit.NSApplicationActivationPolicyAccessory)
    elif AppKit is not None:
        ns_app = AppKit.NSApplication.sharedApplication()
        ns_app.setActivationPolicy_(AppKit.NSApplicationActivationPolicyAccessory)

    app = DevServerToolbarApp()
    app.run()


if __name__ == "__main__":
    main()


__all__ = ["main", "DevServerToolbarApp"]
