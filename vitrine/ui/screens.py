from __future__ import annotations

from functools import partial
from pathlib import Path

from kivy.app import App
from kivy.properties import StringProperty
from kivy.uix.screenmanager import Screen

from kivymd.uix.button import MDFlatButton
from kivymd.uix.dialog import MDDialog
from kivymd.uix.list import MDList, OneLineListItem, TwoLineListItem

from vitrine.models import CategoryView, MediaEntry
from vitrine.services.url_finder import first_url
from vitrine.utils.threading import run_in_thread


EXPORT_FILENAME = "vitrine_export.m3u"


def _count_label(count: int) -> str:
    return f"{count} item" if count == 1 else f"{count} itens"


def _fill_entries(container: MDList, entries: list[MediaEntry]) -> None:
    app = App.get_running_app()
    container.clear_widgets()
    for e in entries:
        item = TwoLineListItem(text=e.name, secondary_text=e.sub_category or e.main_category)
        item.bind(on_release=lambda _item, entry=e: app.play(entry))
        container.add_widget(item)


class HomeScreen(Screen):
    def on_pre_enter(self, *args):
        super().on_pre_enter(*args)
        self.refresh()

    def refresh(self) -> None:
        app = App.get_running_app()
        if app.root:
            app.root.status_text = "Carregando..."
        run_in_thread(
            app.playlists.get_all_categories,
            on_done=self._render,
            on_error=lambda e: app.show_error("Erro", str(e)),
        )

    def _render(self, categories: list[CategoryView]) -> None:
        app = App.get_running_app()
        container: MDList = self.ids.category_list
        container.clear_widgets()

        for c in categories:
            item = TwoLineListItem(text=c.name, secondary_text=_count_label(c.count))
            item.bind(on_release=lambda _item, name=c.name: app.open_category(name))
            container.add_widget(item)

        if categories:
            app.root.status_text = ""
        else:
            app.root.status_text = "Nenhuma playlist. Toque em Adicionar."


class CategoryScreen(Screen):
    title = StringProperty("")

    def on_pre_enter(self, *args):
        super().on_pre_enter(*args)
        app = App.get_running_app()
        name = app.state.current_category or ""
        self.title = name
        run_in_thread(
            lambda: app.playlists.get_category(name),
            on_done=self._render,
            on_error=lambda e: app.show_error("Erro", str(e)),
        )

    def _render(self, category: CategoryView | None) -> None:
        app = App.get_running_app()
        container: MDList = self.ids.subcategory_list
        container.clear_widgets()
        if category is None:
            return

        for sub in category.subcategories.values():
            item = TwoLineListItem(text=sub.name, secondary_text=_count_label(sub.count))
            item.bind(on_release=lambda _item, name=sub.name: app.open_subcategory(name))
            container.add_widget(item)


class EntriesScreen(Screen):
    title = StringProperty("")

    def on_pre_enter(self, *args):
        super().on_pre_enter(*args)
        app = App.get_running_app()
        main = app.state.current_category or ""
        sub = app.state.current_subcategory or ""
        self.title = f"{main} / {sub}"

        def _load() -> list[MediaEntry]:
            category = app.playlists.get_category(main)
            if category is None or sub not in category.subcategories:
                return []
            return category.subcategories[sub].entries

        run_in_thread(
            _load,
            on_done=lambda entries: _fill_entries(self.ids.entry_list, entries),
            on_error=lambda e: app.show_error("Erro", str(e)),
        )


class PlayerScreen(Screen):
    title = StringProperty("")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._unsubscribe = None

    def on_pre_enter(self, *args):
        super().on_pre_enter(*args)
        app = App.get_running_app()
        self._unsubscribe = app.state.now_playing.subscribe(self._load)
        self._load(app.state.now_playing.current)

    def on_leave(self, *args):
        super().on_leave(*args)
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        self.ids.video.state = "stop"

    def _load(self, entry: MediaEntry | None) -> None:
        video = self.ids.video
        if entry is None:
            video.state = "stop"
            self.title = ""
            return
        self.title = entry.name
        video.source = entry.url
        video.state = "play"


class AddPlaylistScreen(Screen):
    def on_submit(self) -> None:
        app = App.get_running_app()
        name = (self.ids.name_input.text or "").strip()
        url_text = (self.ids.url_input.text or "").strip()
        content = self.ids.content_input.text or ""
        file_path = (self.ids.file_input.text or "").strip()
        force = (self.ids.force_input.text or "").strip() or None

        if file_path:
            work = partial(app.playlists.import_from_file, file_path, name=name, force_category=force)
        elif content.strip():
            work = partial(app.playlists.add_playlist, name, content, force_category=force)
        else:
            url = first_url(url_text)
            if not url:
                app.show_error("Erro", "Digite uma URL válida.")
                return
            work = partial(app.playlists.import_from_url, url, name=name, force_category=force)

        app.root.status_text = "Importando playlist..."

        def _done(record) -> None:
            app.root.status_text = f"{record.name}: {_count_label(len(record.entries))}"
            self._reset()
            app.root.current = "home"

        run_in_thread(work, on_done=_done, on_error=lambda e: app.show_error("Erro", str(e)))

    def _reset(self) -> None:
        for key in ("name_input", "url_input", "content_input", "file_input", "force_input"):
            self.ids[key].text = ""


class SearchScreen(Screen):
    def on_search(self) -> None:
        app = App.get_running_app()
        query = (self.ids.search_input.text or "").strip()
        app.state.search_query = query
        run_in_thread(
            lambda: app.playlists.search(query),
            on_done=self._render,
            on_error=lambda e: app.show_error("Erro", str(e)),
        )

    def _render(self, entries: list[MediaEntry]) -> None:
        _fill_entries(self.ids.result_list, entries)
        container: MDList = self.ids.result_list
        if not entries and App.get_running_app().state.search_query:
            container.add_widget(OneLineListItem(text="Nenhum resultado encontrado"))


class SettingsScreen(Screen):
    summary = StringProperty("")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._dialog: MDDialog | None = None

    def on_pre_enter(self, *args):
        super().on_pre_enter(*args)
        self.refresh()

    def refresh(self) -> None:
        app = App.get_running_app()

        def _render(stats) -> None:
            self.summary = (
                f"Playlists: {stats.playlists} | Categorias: {stats.categories} | Itens: {stats.entries}"
            )

        run_in_thread(app.playlists.stats, on_done=_render, on_error=lambda e: app.show_error("Erro", str(e)))

    def export_data(self) -> None:
        app = App.get_running_app()
        target = Path(app.user_data_dir) / EXPORT_FILENAME

        def _work() -> int:
            entries = app.playlists.export_all_entries()
            target.write_text(app.playlists.export_m3u(), encoding="utf-8")
            return len(entries)

        def _done(count: int) -> None:
            app.show_error("Dados exportados", f"{_count_label(count)} exportados para {target}")

        run_in_thread(_work, on_done=_done, on_error=lambda e: app.show_error("Erro", str(e)))

    def confirm_clear(self) -> None:
        self._dialog = MDDialog(
            title="Limpar todos os dados",
            text="Remover todas as playlists? Esta ação não pode ser desfeita.",
            buttons=[
                MDFlatButton(text="Cancelar", on_release=lambda *_: self._dialog.dismiss()),
                MDFlatButton(text="Confirmar", on_release=lambda *_: self._clear()),
            ],
        )
        self._dialog.open()

    def _clear(self) -> None:
        app = App.get_running_app()
        if self._dialog:
            self._dialog.dismiss()
            self._dialog = None
        run_in_thread(
            app.playlists.clear_all_data,
            on_done=lambda _: self.refresh(),
            on_error=lambda e: app.show_error("Erro", "Não foi possível limpar os dados."),
        )
