"""Entry point: configure logging, build the playlist and controller, run the GUI."""

import logging
import sys
import tkinter as tk

from midi_jukebox import Playlist
from midi_jukebox.app import App
from midi_jukebox.config import load_config
from midi_jukebox.log_config import setup_logging
from midi_jukebox.player import PlayerController


def main():
    setup_logging()
    log = logging.getLogger("midi_jukebox.main")
    config = load_config()
    root = tk.Tk()
    try:
        playlist = Playlist()
        controller = PlayerController(
            playlist,
            dispatch=lambda fn: root.after(0, fn),
            volume=config.volume,
            port_name=config.port_name,
        )
        App(root, playlist, controller)
        log.info("Playlist initialized - ready to import music")
        root.mainloop()
    except Exception as e:
        log.exception("Startup error")
        root.destroy()
        from tkinter import messagebox
        messagebox.showerror('Startup error', str(e))
        sys.exit(1)


if __name__ == '__main__':
    main()
