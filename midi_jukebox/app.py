"""Tkinter GUI: renders the playlist and forwards user actions to the controller."""

import logging
import os
import tkinter as tk
from tkinter import filedialog, messagebox, simpledialog
from tkinter import ttk

from midi_jukebox import album_art, log_config
from midi_jukebox.album_art import ART_SIZE
from midi_jukebox.errors import InvalidPosition, MediaError, TrackNotFound
from midi_jukebox.library import format_time
from midi_jukebox.player import PlayerController
from midi_jukebox.playlist import Playlist
from midi_jukebox.track import Track
from midi_jukebox.version import APP_NAME, __version__
from midi_jukebox.theme import (
    ACCENT,
    ACCENT_HOVER,
    BG,
    BORDER,
    CARD,
    CARD_ACTIVE,
    DANGER,
    EMPTY_PLAYLIST_TEXT,
    FG,
    FG_MUTED,
    ICON_FONT,
    ICON_NEXT,
    ICON_PAUSE,
    ICON_PLAY,
    ICON_PREV,
    ICON_REPEAT,
    ICON_SHUFFLE,
    LABEL_FONT,
    LISTBOX_MIN_ROWS,
    PAD,
    SMALL_FONT,
    SMALL_PAD,
    SUBTLE,
    TITLE_FONT,
)

log = logging.getLogger(__name__)

MIDI_FILETYPES = [('MIDI files', '*.mid *.midi'), ('All files', '*.*')]
IMAGE_FILETYPES = [('Images', '*.png *.jpg *.jpeg *.gif *.bmp'), ('All files', '*.*')]


class AddMusicDialog(simpledialog.Dialog):
    """Modal form: title, artist, MIDI file, optional album art."""

    def body(self, master):
        self.result = None
        self._title = tk.StringVar()
        self._artist = tk.StringVar()
        self._path = tk.StringVar()
        self._art = tk.StringVar()
        rows = [
            ('Title', self._title, None),
            ('Artist', self._artist, None),
            ('MIDI file', self._path, self._browse_midi),
            ('Album art', self._art, self._browse_art),
        ]
        first = None
        for row, (label, var, browse) in enumerate(rows):
            tk.Label(master, text=label).grid(row=row, column=0, sticky='w', pady=2)
            entry = tk.Entry(master, textvariable=var, width=36)
            entry.grid(row=row, column=1, padx=(SMALL_PAD, 0), pady=2)
            if browse:
                tk.Button(master, text='…', command=browse).grid(row=row, column=2, padx=(SMALL_PAD, 0))
            first = first or entry
        return first

    def _browse_midi(self):
        path = filedialog.askopenfilename(parent=self, title='Select MIDI file', filetypes=MIDI_FILETYPES)
        if path:
            self._path.set(path)
            if not self._title.get().strip():
                self._title.set(os.path.splitext(os.path.basename(path))[0])

    def _browse_art(self):
        path = filedialog.askopenfilename(parent=self, title='Select album art', filetypes=IMAGE_FILETYPES)
        if path:
            self._art.set(path)

    def validate(self):
        if not self._path.get().strip():
            messagebox.showwarning('No file', 'Please select a MIDI file!', parent=self)
            return False
        return True

    def apply(self):
        self.result = {
            'path': self._path.get().strip(),
            'title': self._title.get().strip() or None,
            'artist': self._artist.get().strip() or None,
            'album_art': self._art.get().strip() or None,
        }


class App:
    def __init__(self, root, playlist: Playlist, controller: PlayerController):
        self.root = root
        self.playlist = playlist
        self.controller = controller
        self._seeking = False
        root.title(f'{APP_NAME} {__version__}')
        root.configure(bg=BG)
        root.minsize(460, 520)
        root.option_add('*Font', LABEL_FONT)
        root.option_add('*Background', BG)
        root.option_add('*Foreground', FG)
        root.option_add('*selectBackground', ACCENT)
        root.option_add('*selectForeground', BG)

        style = ttk.Style()
        style.theme_use('clam')
        style.configure('Seek.Horizontal.TScale', troughcolor=SUBTLE, background=ACCENT, bordercolor=BORDER)

        tk.Label(root, text=APP_NAME, font=TITLE_FONT, fg=ACCENT, bg=BG).pack(anchor='w', padx=PAD, pady=(PAD, SMALL_PAD))

        # ---- Now playing ----
        now = tk.Frame(root, bg=CARD)
        now.pack(fill='x', padx=PAD, pady=SMALL_PAD)
        self.art_label = tk.Label(now, bg=CARD)
        self.art_label.pack(side='left', padx=PAD, pady=PAD)
        info = tk.Frame(now, bg=CARD)
        info.pack(side='left', fill='both', expand=True, pady=PAD)
        self.title_label = tk.Label(info, text='Nothing loaded', font=TITLE_FONT, bg=CARD, anchor='w')
        self.title_label.pack(fill='x')
        self.artist_label = tk.Label(info, text='', fg=FG_MUTED, bg=CARD, anchor='w')
        self.artist_label.pack(fill='x')

        # ---- Progress ----
        progress = tk.Frame(root, bg=BG)
        progress.pack(fill='x', padx=PAD)
        self.time_label = tk.Label(progress, text='0:00', font=SMALL_FONT, fg=FG_MUTED)
        self.time_label.pack(side='left')
        self.duration_label = tk.Label(progress, text='0:00', font=SMALL_FONT, fg=FG_MUTED)
        self.duration_label.pack(side='right')
        self.seek_var = tk.DoubleVar(value=0.0)
        self.seek_scale = ttk.Scale(
            progress, from_=0, to=100, variable=self.seek_var,
            orient='horizontal', style='Seek.Horizontal.TScale',
        )
        self.seek_scale.pack(side='left', fill='x', expand=True, padx=SMALL_PAD)
        self.seek_scale.bind('<ButtonPress-1>', lambda e: self._begin_seek())
        self.seek_scale.bind('<ButtonRelease-1>', lambda e: self._end_seek())

        # ---- Transport ----
        transport = tk.Frame(root, bg=BG)
        transport.pack(pady=SMALL_PAD)
        self.shuffle_var = tk.BooleanVar(value=False)
        self.repeat_var = tk.BooleanVar(value=False)
        tk.Checkbutton(
            transport, text=ICON_SHUFFLE, font=ICON_FONT, variable=self.shuffle_var,
            indicatoron=False, command=self._on_shuffle_toggled,
        ).pack(side='left', padx=SMALL_PAD)
        tk.Button(transport, text=ICON_PREV, font=ICON_FONT, command=self.controller.previous).pack(side='left', padx=SMALL_PAD)
        self.play_btn = tk.Button(
            transport, text=ICON_PLAY, font=ICON_FONT, fg=ACCENT,
            activeforeground=ACCENT_HOVER, command=self.controller.toggle_play,
        )
        self.play_btn.pack(side='left', padx=SMALL_PAD)
        tk.Button(transport, text=ICON_NEXT, font=ICON_FONT, command=self.controller.next).pack(side='left', padx=SMALL_PAD)
        tk.Checkbutton(
            transport, text=ICON_REPEAT, font=ICON_FONT, variable=self.repeat_var,
            indicatoron=False, command=self._on_repeat_toggled,
        ).pack(side='left', padx=SMALL_PAD)

        volume = tk.Frame(root, bg=BG)
        volume.pack(fill='x', padx=PAD)
        tk.Label(volume, text='Volume', font=SMALL_FONT, fg=FG_MUTED).pack(side='left')
        self.volume_var = tk.IntVar(value=self.controller.volume)
        tk.Scale(
            volume, from_=0, to=100, orient='horizontal', variable=self.volume_var,
            showvalue=False, highlightthickness=0, troughcolor=SUBTLE,
            command=lambda v: self.controller.set_volume(int(float(v))),
        ).pack(side='left', fill='x', expand=True, padx=SMALL_PAD)

        # ---- Playlist ----
        toolbar = tk.Frame(root, bg=BG)
        toolbar.pack(fill='x', padx=PAD, pady=(PAD, SMALL_PAD))
        tk.Button(toolbar, text='Add music', command=self._add_music).pack(side='left')
        tk.Button(toolbar, text='Insert at…', command=self._insert_music).pack(side='left', padx=(SMALL_PAD, 0))
        tk.Button(toolbar, text='Remove', command=self._remove_selected).pack(side='left', padx=(SMALL_PAD, 0))
        tk.Button(toolbar, text='Clear playlist', fg=DANGER, command=self._clear_playlist).pack(side='right')

        list_frame = tk.Frame(root, bg=BG)
        list_frame.pack(fill='both', expand=True, padx=PAD)
        scroll = tk.Scrollbar(list_frame)
        scroll.pack(side='right', fill='y')
        self.listbox = tk.Listbox(
            list_frame, height=LISTBOX_MIN_ROWS, bg=CARD, fg=FG,
            activestyle='none', highlightthickness=0, yscrollcommand=scroll.set,
        )
        self.listbox.pack(side='left', fill='both', expand=True)
        scroll.config(command=self.listbox.yview)
        self.listbox.bind('<Double-Button-1>', lambda e: self._play_selected())

        self.status = tk.Label(root, text='', font=SMALL_FONT, fg=FG_MUTED, anchor='w')
        self.status.pack(fill='x', padx=PAD, pady=(SMALL_PAD, 0))
        tk.Label(
            root, text=f'Log: {log_config.LOG_FILE_PATH or "(stderr only)"}',
            font=SMALL_FONT, fg=FG_MUTED, anchor='w',
        ).pack(fill='x', padx=PAD, pady=(0, PAD))

        controller.on_track_loaded = self._on_track_loaded
        controller.on_state_changed = self._on_state_changed
        controller.on_progress = self._on_progress
        controller.on_error = self._on_error
        root.protocol('WM_DELETE_WINDOW', self._on_close)

        self._on_track_loaded(self.controller.loaded_track)
        self._refresh_playlist()

    # ---- rendering ----

    def _refresh_playlist(self):
        self.listbox.delete(0, tk.END)
        tracks = self.playlist.snapshot()
        current = self.playlist.current_index()
        for i, track in enumerate(tracks):
            self.listbox.insert(tk.END, f'{track.display_line()}   {track.duration_label}')
            if i == current:
                self.listbox.itemconfig(i, bg=CARD_ACTIVE, fg=ACCENT)
        if current is not None:
            self.listbox.see(current)
        n = len(tracks)
        self.status.config(
            text=f'{n} song{"s" if n != 1 else ""} in playlist.' if n else EMPTY_PLAYLIST_TEXT
        )

    def _on_track_loaded(self, track: Track | None):
        if track is None:
            self.title_label.config(text='Nothing loaded')
            self.artist_label.config(text='')
            self.duration_label.config(text='0:00')
            self.art_label.config(image='')
        else:
            self.title_label.config(text=track.title)
            self.artist_label.config(text=track.artist)
            self.duration_label.config(text=track.duration_label or '0:00')
            photo = album_art.get_photo_image(track.album_art_ref, ART_SIZE)
            self.art_label.config(image=photo)
            self.art_label.image = photo
        self.time_label.config(text='0:00')
        self.seek_var.set(0.0)
        self._refresh_playlist()

    def _on_state_changed(self, playing: bool):
        self.play_btn.config(text=ICON_PAUSE if playing else ICON_PLAY)

    def _on_progress(self, elapsed: float, total: float):
        self.time_label.config(text=format_time(elapsed))
        if total:
            self.duration_label.config(text=format_time(total))
            if not self._seeking:
                self.seek_var.set(elapsed / total * 100)

    def _on_error(self, message: str):
        messagebox.showerror('Playback error', message)

    # ---- user actions ----

    def _begin_seek(self):
        self._seeking = True

    def _end_seek(self):
        self._seeking = False
        self.controller.seek(self.seek_var.get())

    def _on_shuffle_toggled(self):
        self.controller.shuffle = self.shuffle_var.get()

    def _on_repeat_toggled(self):
        self.controller.repeat = self.repeat_var.get()

    def _selected_track(self) -> Track | None:
        sel = self.listbox.curselection()
        tracks = self.playlist.snapshot()
        if not sel or sel[0] >= len(tracks):
            return None
        return tracks[sel[0]]

    def _play_selected(self):
        track = self._selected_track()
        if track is None:
            return
        try:
            self.controller.play_by_id(track.id)
        except TrackNotFound:
            log.warning('Selected track %r vanished', track.id)
            self._refresh_playlist()

    def _import(self, position: int | None):
        dialog = AddMusicDialog(self.root, title='Add music')
        if not dialog.result:
            return
        form = dialog.result
        try:
            track = self.controller.add_file(
                form['path'], form['title'], form['artist'], form['album_art'], position=position,
            )
        except (MediaError, InvalidPosition) as e:
            messagebox.showerror('Import failed', str(e))
            return
        self._refresh_playlist()
        messagebox.showinfo('Imported', f'"{track.title}" by {track.artist} has been imported to your playlist!')

    def _add_music(self):
        self._import(None)

    def _insert_music(self):
        count = len(self.playlist)
        position = simpledialog.askinteger(
            'Insert at', f'Position (0-{count}):', parent=self.root, initialvalue=count,
        )
        if position is None:
            return
        self._import(position)

    def _remove_selected(self):
        track = self._selected_track()
        if track is None:
            messagebox.showwarning('No selection', 'Select a song to remove.')
            return
        self.controller.remove_track(track.id)
        self._refresh_playlist()

    def _clear_playlist(self):
        if not len(self.playlist):
            return
        if not messagebox.askyesno('Clear playlist', 'Remove every song from the playlist?'):
            return
        self.controller.clear_playlist()
        self._refresh_playlist()

    def _on_close(self):
        try:
            self.controller.close()
        except Exception:
            log.exception('Error closing MIDI output')
        self.root.destroy()
