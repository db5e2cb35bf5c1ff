"""
Convivio Prompts - Prompt assembly.

This module provides:
- Full-menu prompt with the maximum-priority notes marker
- Narrowed prompts for single dish / wine regeneration
- Invite and backend proposal prompts
"""

from convivio.prompts.builder import (
    Prompt,
    build_cellar_wine_prompt,
    build_dish_prompt,
    build_invite_prompt,
    build_menu_prompt,
    build_proposal_prompt,
    build_purchase_wine_prompt,
    invite_tone,
    italian_long_date,
    season_for,
)

__all__ = [
    "Prompt",
    "build_menu_prompt",
    "build_dish_prompt",
    "build_cellar_wine_prompt",
    "build_purchase_wine_prompt",
    "build_invite_prompt",
    "build_proposal_prompt",
    "invite_tone",
    "italian_long_date",
    "season_for",
]
