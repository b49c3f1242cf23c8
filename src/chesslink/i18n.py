"""Internationalisation strings for ChessLink.

Usage::

    from chesslink.i18n import t, set_language

    set_language("French")
    print(t().btn_undo)          # "↩ Annuler"
    print(t().status_to_move.format(side=t().color_white))
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Strings:
    # ── Window / menus ───────────────────────────────────────────────────
    app_title: str
    app_tagline: str
    menu_game: str
    menu_open_link: str
    menu_copy_link: str
    menu_flip_board: str
    menu_quit: str
    address_placeholder: str
    open_link_title: str
    open_link_label: str

    # ── Status line ──────────────────────────────────────────────────────
    color_white: str  # side names, e.g. "White"
    color_black: str
    winner_white: str  # winner names, e.g. "White"
    winner_black: str
    status_checkmate: str  # "Checkmate! {winner} wins."
    status_draw: str
    status_check: str
    status_to_move: str  # "{side} to move"
    status_thinking: str

    # ── Notifications ────────────────────────────────────────────────────
    notify_game_loaded: str
    notify_link_invalid: str
    notify_new_game: str
    notify_link_copied: str
    notify_link_in_address_bar: str

    # ── Advisor ──────────────────────────────────────────────────────────
    ai_name: str
    ai_fallback_commentary: str
    commentary_title: str

    # ── ControlPanel ─────────────────────────────────────────────────────
    mode_local: str
    mode_link: str
    mode_ai: str
    btn_reset: str
    btn_undo: str
    btn_flip: str
    btn_copy_link: str
    copy_link_hint: str

    # ── RecoveryView ─────────────────────────────────────────────────────
    recovery_title: str
    recovery_hint: str
    recovery_reload: str


# ── Built-in locales ─────────────────────────────────────────────────────────

_EN = Strings(
    app_title="ChessLink",
    app_tagline="Play, generate a link, and challenge your friends.",
    menu_game="&Game",
    menu_open_link="&Open Link...",
    menu_copy_link="&Copy Link",
    menu_flip_board="&Flip Board",
    menu_quit="&Quit",
    address_placeholder="Paste a shared link and press Enter",
    open_link_title="Open Link",
    open_link_label="Shared game link:",
    color_white="White",
    color_black="Black",
    winner_white="White",
    winner_black="Black",
    status_checkmate="Checkmate! {winner} wins.",
    status_draw="Draw!",
    status_check="Check!",
    status_to_move="{side} to move",
    status_thinking="{name} is thinking...",
    notify_game_loaded="Game loaded! Your move.",
    notify_link_invalid="Invalid link, starting position loaded.",
    notify_new_game="New game started",
    notify_link_copied="Link generated and copied! Send it to your friend.",
    notify_link_in_address_bar="Link generated in the address bar!",
    ai_name="AI",
    ai_fallback_commentary="I'm a little distracted... let's try this.",
    commentary_title="AI analysis",
    mode_local="Local",
    mode_link="Online",
    mode_ai="Vs AI",
    btn_reset="Reset",
    btn_undo="↩ Undo",
    btn_flip="⟲ Flip",
    btn_copy_link="Share game link",
    copy_link_hint="Play your move, then click here to send the link to your friend.",
    recovery_title="Oops! Something went wrong.",
    recovery_hint="Check the log output or your API configuration (OPENAI_API_KEY).",
    recovery_reload="Reload",
)

_FR = Strings(
    app_title="ChessLink",
    app_tagline="Jouez, générez un lien, et défiez vos amis.",
    menu_game="&Partie",
    menu_open_link="&Ouvrir un lien...",
    menu_copy_link="&Copier le lien",
    menu_flip_board="&Inverser l'échiquier",
    menu_quit="&Quitter",
    address_placeholder="Collez un lien de partie puis appuyez sur Entrée",
    open_link_title="Ouvrir un lien",
    open_link_label="Lien de la partie :",
    color_white="Blancs",
    color_black="Noirs",
    winner_white="Les Blancs",
    winner_black="Les Noirs",
    status_checkmate="Échec et mat ! {winner} gagnent.",
    status_draw="Match nul !",
    status_check="Échec !",
    status_to_move="Trait aux {side}",
    status_thinking="{name} réfléchit...",
    notify_game_loaded="Partie chargée ! À vous de jouer.",
    notify_link_invalid="Lien invalide, position initiale chargée.",
    notify_new_game="Nouvelle partie commencée",
    notify_link_copied="Lien généré et copié ! Envoyez-le à votre ami.",
    notify_link_in_address_bar="Lien généré dans l'URL !",
    ai_name="L'IA",
    ai_fallback_commentary="Je suis un peu distrait... essayons ça.",
    commentary_title="Analyse de l'IA",
    mode_local="Local",
    mode_link="En Ligne",
    mode_ai="Vs IA",
    btn_reset="Reset",
    btn_undo="↩ Annuler",
    btn_flip="⟲ Inverser",
    btn_copy_link="Partager le lien de la partie",
    copy_link_hint="Jouez votre coup, puis cliquez ici pour envoyer le lien à votre ami.",
    recovery_title="Oups ! Une erreur est survenue.",
    recovery_hint="Vérifiez les journaux ou votre configuration API (OPENAI_API_KEY).",
    recovery_reload="Recharger",
)

_LOCALES: dict[str, Strings] = {
    "English": _EN,
    "French": _FR,
}

LANGUAGES: list[str] = list(_LOCALES.keys())

_current: Strings = _EN


def t() -> Strings:
    """Return the active locale strings."""
    return _current


def set_language(language: str) -> None:
    """Switch the global locale. Unknown names fall back to English."""
    global _current
    _current = _LOCALES.get(language, _EN)
