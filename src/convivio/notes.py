"""
Convivio - Dinner notes export.

Plain-text rendering of the three dinner briefings, for printing or sharing
from the CLI. Timelines are printed earliest first.
"""

from convivio.models.dinner import DinnerEvent
from convivio.models.notes import (
    DinnerNoteType,
    HostingNotes,
    KitchenNotes,
    NoteContent,
    WineNotes,
)
from convivio.prompts.builder import italian_long_date

FOOTER = "---\nGenerato da Convivio"


def _header(title: str, dinner: DinnerEvent) -> list[str]:
    return [
        f"### {title.upper()}",
        f"Cena: {dinner.title}",
        f"Data: {italian_long_date(dinner.date)} alle {dinner.date.strftime('%H:%M')}",
    ]


def _bullets(heading: str, items: list[str], marker: str = "-") -> list[str]:
    if not items:
        return []
    return ["", heading, *(f"{marker} {item}" for item in items)]


def _kitchen_lines(content: KitchenNotes) -> list[str]:
    lines = ["", "### TIMELINE CUCINA"]
    for step in sorted(content.timeline, key=lambda s: s.minutes):
        line = f"- {step.label}: {step.description}"
        if step.dish:
            line += f" [{step.dish}]"
        lines.append(line)

    lines += ["", "### RICETTE"]
    for recipe in content.recipes:
        lines += [
            "",
            f"#### {recipe.name} ({recipe.category})",
            f"Difficoltà: {recipe.difficulty.value} | Prep: {recipe.prep_minutes}min "
            f"| Cottura: {recipe.cook_minutes}min",
        ]
        if recipe.make_ahead:
            lines.append("✓ Preparabile in anticipo")
        lines += ["", "Ingredienti:"]
        for ing in recipe.ingredients:
            unit = f" {ing.unit}" if ing.unit else ""
            lines.append(f"- {ing.name}: {ing.quantity}{unit}")
        lines += ["", "Procedimento:"]
        lines += [f"{i}. {step}" for i, step in enumerate(recipe.steps, 1)]
        if recipe.plating:
            lines += ["", f"Impiattamento: {recipe.plating.description}"]

    if content.shopping_list:
        lines += ["", "### LISTA SPESA"]
        for category in content.shopping_list:
            lines += ["", f"{category.category}:"]
            lines += [f"- {item.name} ({item.quantity})" for item in category.items]

    lines += _bullets("### CONSIGLI CHEF", content.chef_tips)
    return lines


def _wine_lines(content: WineNotes) -> list[str]:
    lines = ["", "### TIMELINE VINI"]
    for step in sorted(content.timeline, key=lambda s: s.minutes):
        lines.append(f"- {step.icon} {step.label}: {step.wine} - {step.action}")

    lines += ["", "### SCHEDE VINO"]
    for card in content.cards:
        lines += ["", f"#### {card.wine}"]
        if card.producer:
            lines.append(f"Produttore: {card.producer}")
        lines += [
            f"Abbinamento: {card.course}",
            f"Temperatura: {card.serving_temperature}",
            f"Bicchiere: {card.glass}",
            f"Quantità: {card.per_person}",
        ]
        if card.decanting and card.decanting.needed:
            line = f"Decantazione: {card.decanting.duration or 'sì'}"
            if card.decanting.reason:
                line += f" - {card.decanting.reason}"
            lines.append(line)
        lines.append(f"Presentazione: {card.presentation}")

    if content.service_order:
        lines += ["", "### SEQUENZA SERVIZIO"]
        for step in sorted(content.service_order, key=lambda s: s.order):
            lines.append(f"{step.order}. {step.wine} - {step.moment}")

    if content.equipment:
        lines += ["", "### ATTREZZATURA"]
        for item in content.equipment:
            line = f"- {item.icon} {item.name}" if item.icon else f"- {item.name}"
            if item.quantity:
                line += f" (x{item.quantity})"
            lines.append(line)

    lines += _bullets("### CONSIGLI SOMMELIER", content.sommelier_tips)
    return lines


def _hosting_lines(content: HostingNotes) -> list[str]:
    prep = content.preparation
    lines = ["", "### PREPARAZIONE AMBIENTE", "", "Tavola:", prep.table.description]
    if prep.table.tablecloth:
        lines.append(f"- Tovaglia: {prep.table.tablecloth}")
    if prep.table.glasses:
        lines.append(f"- Bicchieri: {prep.table.glasses}")
    lines += ["", "Atmosfera:"]
    if prep.atmosphere.lighting:
        lines.append(f"- Illuminazione: {prep.atmosphere.lighting}")
    if prep.atmosphere.music:
        lines.append(f"- Musica: {prep.atmosphere.music}")
    lines += _bullets("Checklist pre-ospiti:", prep.checklist, marker="☐")

    welcome = content.welcome
    aperitif = welcome.aperitif
    lines += [
        "",
        "### ACCOGLIENZA",
        f"Orario arrivo: {welcome.arrival}",
        f"Dove ricevere: {welcome.where}",
        f"Aperitivo: {aperitif.what} - {aperitif.where} ({aperitif.duration})",
        f"Come accomodare: {welcome.seating}",
    ]
    lines += _bullets("Rompighiaccio:", welcome.icebreakers)

    evening = content.evening
    lines += [
        "",
        "### GESTIONE SERATA",
        f"Tempi portate: {evening.course_timing}",
        f"Sparecchiare: {evening.clearing}",
    ]
    lines += _bullets("Argomenti conversazione:", evening.conversation)
    lines += _bullets("Se qualcosa va storto:", evening.contingencies)

    after = content.after_dinner
    lines += ["", "### POST CENA", f"Caffè/Tè: {after.coffee.when} - {after.coffee.how}"]
    if after.digestif:
        lines.append(f"Digestivo: {after.digestif.what} - {after.digestif.when}")
    lines.append(f"Congedo: {after.farewell.goodbye}")

    lines += _bullets("### CONSIGLI HOST", content.host_tips)
    return lines


_RENDERERS = {
    DinnerNoteType.KITCHEN: _kitchen_lines,
    DinnerNoteType.WINE: _wine_lines,
    DinnerNoteType.HOSTING: _hosting_lines,
}


def export_note_text(
    note_type: DinnerNoteType | str, content: NoteContent, dinner: DinnerEvent
) -> str:
    """Render a briefing as plain text with a dinner header and a footer."""
    note_type = DinnerNoteType(note_type)
    lines = _header(note_type.display_name, dinner)
    lines += _RENDERERS[note_type](content)
    lines += ["", FOOTER]
    return "\n".join(lines)
