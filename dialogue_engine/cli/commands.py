"""
CLI commands for the dialogue engine
"""

import asyncio
import logging
import sys
from pathlib import Path

import click

from dialogue_engine.cli.play_cmd import DialoguePlayer
from dialogue_engine.cli.validate_cmd import DialogueValidator
from dialogue_engine.engine.inventory import InventoryCache, MemoryInventoryService
from dialogue_engine.engine.resolver import DialogueResolver
from dialogue_engine.locale import LocaleManager
from dialogue_engine.model.loader import DialogueLoader
from dialogue_engine.settings import load_settings


def _parse_equipped(values):
    """--equipped accepts KEY=ITEM or just ITEM (stored as equippedItemId)"""
    equipped = {}
    for value in values:
        key, sep, item_id = value.partition("=")
        if sep:
            equipped[key] = item_id
        else:
            equipped["equippedItemId"] = key
    return equipped


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def cli(debug):
    """Dialogue Engine - branching NPC conversations"""
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")


@cli.command()
@click.argument("file_paths", nargs=-1, required=True, type=click.Path(exists=True))
@click.option("--detailed", "-d", is_flag=True, help="Show document statistics after validation")
def validate(file_paths, detailed):
    """Validate one or more dialogue JSON files"""
    all_valid = True
    for file_path in file_paths:
        validator = DialogueValidator(Path(file_path))
        if not validator.validate():
            all_valid = False
        if detailed and validator.stats:
            click.echo("\n📊 Statistics:")
            for key, value in validator.stats.items():
                click.echo(f"  {key}: {value}")

    if not all_valid:
        click.echo("\n❌ Validation failed!", err=True)
        sys.exit(1)
    click.echo("\n✅ Validation passed!")


@cli.command()
@click.argument("file_path", type=click.Path(exists=True))
def stats(file_path):
    """Show statistics for a dialogue file"""
    path = Path(file_path)
    loader = DialogueLoader()
    document = loader.parse_file(path)
    if document is None:
        for error in loader.errors:
            click.echo(f"❌ {error}", err=True)
        sys.exit(1)

    stats = loader.get_stats(document)
    click.echo(f"\n📊 Statistics for {path.name}")
    click.echo("=" * 50)
    click.echo(f"  Lines:    {stats['lines']:>6}")
    click.echo(f"  Forks:    {stats['forks']:>6}")
    click.echo(f"  Options:  {stats['options']:>6}")
    click.echo(f"  Branches: {stats['branches']:>6}")
    click.echo(f"  Checks:   {stats['checks']:>6}")
    click.echo(f"  Actions:  {stats['actions']:>6}")
    if stats["items"]:
        click.echo(f"\n🎒 Items referenced: {', '.join(stats['items'])}")
    if stats["errors"] or stats["warnings"]:
        click.echo(f"\n⚠️  Errors: {stats['errors']}  Warnings: {stats['warnings']}")


@cli.command()
@click.argument("file_path", type=click.Path(exists=True))
@click.option("--item", "-i", "items", multiple=True, help="Item id the player holds (repeatable)")
@click.option("--equipped", "-e", multiple=True, help="Equipped item as KEY=ITEM or ITEM")
def show(file_path, items, equipped):
    """Print the lines a player with the given items would see first"""
    loader = DialogueLoader()
    document = loader.parse_file(Path(file_path))
    if document is None:
        for error in loader.errors:
            click.echo(f"❌ {error}", err=True)
        sys.exit(1)

    service = MemoryInventoryService(items={item: 1 for item in items}, extra=_parse_equipped(equipped))
    resolver = DialogueResolver(InventoryCache(service))
    resolution = asyncio.run(resolver.resolve(document))

    click.echo(f"\n📍 Dialogue: {document.id}")
    click.echo("=" * 50)
    for line in resolution.lines:
        click.echo(f"  {line.name or line.speaker}: \"{line.text}\"")
        for option in line.options or []:
            click.echo(f"    -> [{option.id}] {option.text}")
    if resolution.actions:
        click.echo("\n⚡ Actions on completion:")
        for action in resolution.actions:
            click.echo(f"  {action.to_dict()}")


@cli.command()
@click.argument("npc_id")
@click.option("--dialogues", "-d", type=click.Path(exists=True, file_okay=False), help="Dialogue directory")
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Settings JSON file")
@click.option("--locales", type=click.Path(exists=True, file_okay=False), help="Directory of <locale>.json files")
@click.option("--locale", default=None, help="Locale to display")
@click.option("--item", "-i", "items", multiple=True, help="Item id the player holds (repeatable)")
@click.option("--equipped", "-e", multiple=True, help="Equipped item as KEY=ITEM or ITEM")
@click.option("--name", "npc_name", default=None, help="NPC display name")
def play(npc_id, dialogues, config, locales, locale, items, equipped, npc_name):
    """Talk to an NPC interactively"""
    settings = load_settings(Path(config) if config else None)
    if dialogues:
        settings.dialogues_root = Path(dialogues)
    if locale:
        settings.locale.locale = locale

    locale_root = Path(locales) if locales else settings.locale.root
    translator = None
    if locale_root:
        translator = LocaleManager.load_directory(
            locale_root, locale=settings.locale.locale, fallback_locale=settings.locale.fallback_locale
        )

    held = {}
    for item in items:
        held[item] = held.get(item, 0) + 1

    try:
        player = DialoguePlayer(
            settings.dialogues_root,
            items=held,
            equipped=_parse_equipped(equipped),
            locales=translator,
            settings=settings,
            output=click.echo,
        )
        played = player.play(npc_id, npc_name)
    except Exception as e:
        click.echo(f"\n❌ Error: {e}", err=True)
        sys.exit(1)

    if not played:
        sys.exit(1)


if __name__ == "__main__":
    cli()
