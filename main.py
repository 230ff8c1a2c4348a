from __future__ import annotations

import faulthandler
import logging
import os
import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path

from vitrine.config import is_android, load_config


CRASH_DIR_NAME = "crash_logs"


def _private_dir() -> Path:
    if is_android():
        p = os.environ.get("ANDROID_PRIVATE")
        if p:
            return Path(p)
    return Path.home() / ".vitrine"


def _crash_dir() -> Path:
    base = _private_dir() / CRASH_DIR_NAME
    base.mkdir(parents=True, exist_ok=True)
    return base


def _copy_to_downloads(path: Path) -> None:
    """On Android, mirror a crash file into Downloads/crash_logs so users can send it."""
    if not is_android():
        return
    try:
        from androidstorage4kivy import SharedStorage  # type: ignore
        from jnius import autoclass  # type: ignore

        Environment = autoclass("android.os.Environment")
        SharedStorage().copy_to_shared(
            str(path),
            collection=getattr(Environment, "DIRECTORY_DOWNLOADS", None),
            filepath=os.path.join(CRASH_DIR_NAME, path.name),
        )
    except Exception:  # noqa: BLE001
        pass


def _write_crash_log(text: str) -> str | None:
    try:
        p = _crash_dir() / f"vitrine_crash_{datetime.now().strftime('%Y%m%d_%H%M%S')}.txt"
        p.write_text(text, encoding="utf-8")
        _copy_to_downloads(p)
        return str(p)
    except Exception:  # noqa: BLE001
        return None


def _setup_faulthandler() -> None:
    try:
        f = open(_crash_dir() / "vitrine_faulthandler.txt", "a", encoding="utf-8")
        f.write(f"\n=== START {datetime.now().isoformat()} ===\n")
        f.flush()
        faulthandler.enable(file=f, all_threads=True)
    except Exception:  # noqa: BLE001
        return

    for name in ("SIGABRT", "SIGILL", "SIGFPE", "SIGSEGV", "SIGBUS"):
        sig = getattr(signal, name, None)
        if sig is None:
            continue
        try:
            faulthandler.register(sig, file=f, all_threads=True)
        except (AttributeError, RuntimeError, ValueError):
            pass


def _excepthook(exc_type, exc, tb):
    _write_crash_log("".join(traceback.format_exception(exc_type, exc, tb)))
    sys.__excepthook__(exc_type, exc, tb)


sys.excepthook = _excepthook
_setup_faulthandler()

from kivy.lang import Builder
from kivy.properties import StringProperty
from kivy.uix.label import Label
from kivy.uix.screenmanager import Screen
from kivy.uix.screenmanager import ScreenManager

from kivymd.app import MDApp
from kivymd.uix.button import MDFlatButton
from kivymd.uix.dialog import MDDialog

from vitrine.app_state import AppState
from vitrine.models import MediaEntry
from vitrine.services.playlists import HttpPlaylistFetcher, PlaylistService
from vitrine.services.storage import JsonPlaylistStore
from vitrine.ui import screens as _screens  # noqa: F401


class Root(ScreenManager):
    status_text = StringProperty("")


class VitrineApp(MDApp):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.config_data = load_config()
        self.title = self.config_data.app_name
        logging.getLogger("vitrine").setLevel(self.config_data.log_level)

        self.state = AppState()
        store = JsonPlaylistStore(
            base_dir=self.user_data_dir,
            key=self.config_data.store_key,
            filename=self.config_data.state_filename,
        )
        fetcher = HttpPlaylistFetcher(
            user_agent=self.config_data.user_agent,
            timeout_s=self.config_data.fetch_timeout_s,
        )
        self.playlists = PlaylistService(store=store, fetcher=fetcher)
        self._dialog: MDDialog | None = None
        self._return_screen = "home"

    def build(self):
        self.theme_cls.primary_palette = "Orange"
        self.theme_cls.theme_style = "Dark"

        try:
            Builder.load_file(os.path.join(os.path.dirname(__file__), "vitrine", "ui", "vitrine.kv"))
            return Root()
        except Exception:  # noqa: BLE001
            err = traceback.format_exc()
            _write_crash_log(err)
            root = Root()
            scr = Screen(name="error")
            scr.add_widget(Label(text=err))
            root.add_widget(scr)
            root.current = "error"
            return root

    def on_start(self):
        if self.root.has_screen("home"):
            self.root.get_screen("home").refresh()

    def open_category(self, name: str) -> None:
        self.state.current_category = name
        self.state.current_subcategory = None
        self.root.current = "category"

    def open_subcategory(self, name: str) -> None:
        self.state.current_subcategory = name
        self.root.current = "entries"

    def play(self, entry: MediaEntry) -> None:
        self._return_screen = self.root.current
        self.state.now_playing.set(entry)
        self.root.current = "player"

    def go_back_from_player(self) -> None:
        self.root.current = self._return_screen or "home"

    def show_error(self, title: str, text: str):
        if self._dialog:
            self._dialog.dismiss()
            self._dialog = None

        self._dialog = MDDialog(
            title=title,
            text=text,
            buttons=[MDFlatButton(text="OK", on_release=lambda *_: self._dialog.dismiss())],
        )
        self._dialog.open()


if __name__ == "__main__":
    try:
        VitrineApp().run()
    except Exception:  # noqa: BLE001
        _write_crash_log(traceback.format_exc())
        raise
