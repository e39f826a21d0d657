"""UI theme constants — dark player theme."""

# Base palette
BG = '#121212'
FG = '#e8e8e8'
FG_MUTED = '#9a9a9a'
ACCENT = '#1db954'
ACCENT_HOVER = '#1ed760'
CARD = '#1e1e1e'
CARD_ACTIVE = '#2a3d30'  # highlighted "now playing" entry
SUBTLE = '#3a3a3a'
BORDER = '#2c2c2c'
DANGER = '#ef4444'

# Typography
FONT_FAMILY = 'Segoe UI'
TITLE_FONT = (FONT_FAMILY, 13, 'bold')
LABEL_FONT = (FONT_FAMILY, 9)
SMALL_FONT = (FONT_FAMILY, 8)
ICON_FONT = (FONT_FAMILY, 14)

# Spacing
PAD = 8
SMALL_PAD = 4

LISTBOX_MIN_ROWS = 10

# Transport button labels
ICON_SHUFFLE = '⤮'
ICON_PREV = '⏮'
ICON_PLAY = '▶'
ICON_PAUSE = '⏸'
ICON_NEXT = '⏭'
ICON_REPEAT = '🔁'

EMPTY_PLAYLIST_TEXT = 'No music in playlist. Click "Add music" to import MIDI files.'
