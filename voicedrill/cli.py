"""voicedrill CLI entry point."""

import sys
from collections.abc import Callable
from typing import Any

import click
import numpy as np

from voicedrill import __version__
from voicedrill.chord_types import CHORD_DEFINITIONS, INTERVAL_NAMES, ChordType, degree_name
from voicedrill.exceptions import VoicedrillError
from voicedrill.logging_config import setup_logging
from voicedrill.pitch import NOTE_NAMES_FLAT, NOTE_NAMES_SHARP, format_notes
from voicedrill.progressions import (
    PROGRESSION_TEMPLATES,
    ProgressionTemplate,
    RealizedChord,
    extend_progression,
    get_progression,
    realize_progression,
)
from voicedrill.settings import PracticeSettings, load_settings, save_settings
from voicedrill.voicing_recipes import STYLE_NAMES, VoicingStyle, registered_recipes
from voicedrill.voicing_strategy import (
    Voicing,
    generate_progression_voicings,
    realize_voicing,
    voice_leading_distance,
)

KEY_CHOICES = sorted(set(NOTE_NAMES_FLAT) | set(NOTE_NAMES_SHARP))
STYLE_CHOICES = [style.value for style in VoicingStyle]


def _fail(message: str) -> None:
    click.echo(f"  ERROR: {message}", err=True)
    sys.exit(1)


def _drill_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by ``drill`` and ``sheet``; unset options keep the settings file value."""
    options = [
        click.option("--key", "-k", type=click.Choice(KEY_CHOICES), default=None,
                     help="Practice key. [default: C]"),
        click.option("--progression", "-p", "progression_id", default=None, metavar="ID",
                     help="Progression template id (see `voicedrill progressions`)."),
        click.option("--bars", "-b", type=click.IntRange(1, 64), default=None,
                     help="Number of bars to fill. [default: 4]"),
        click.option("--style", "-s", "styles", type=click.Choice(STYLE_CHOICES), multiple=True,
                     help="Voicing style filter; repeat for several. [default: shell, rootless-a]"),
        click.option("--solo", "mode", flag_value="solo", default=None,
                     help="Solo piano: always use full voicings with the root."),
        click.option("--smooth/--random", "smooth", default=None,
                     help="Voice-lead the progression, or pick voicings at random."),
        click.option("--flats/--sharps", "prefer_flats", default=None,
                     help="Enharmonic spelling of note names."),
        click.option("--seed", type=int, default=None,
                     help="Seed for --random so a drill can be repeated."),
        click.option("--settings", "settings_path", type=click.Path(exists=True, dir_okay=False),
                     default=None, help="Load session settings from a JSON file."),
        click.option("--save-settings", "save_path", type=click.Path(dir_okay=False),
                     default=None, help="Write the resolved settings to a JSON file."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _resolve_settings(
    settings_path: str | None,
    styles: tuple[str, ...],
    **overrides: Any,
) -> PracticeSettings:
    """Merge the settings file (if any) with command-line overrides."""
    settings = load_settings(settings_path) if settings_path else PracticeSettings()
    if styles:
        overrides["voicing_styles"] = tuple(styles)
    return settings.replace(**overrides)


def _build_drill(
    settings: PracticeSettings,
) -> tuple[ProgressionTemplate, list[RealizedChord], list[Voicing]]:
    """Realize, extend and voice the progression the settings describe."""
    template = get_progression(settings.progression_id)
    chords = extend_progression(
        realize_progression(template, settings.key, settings.prefer_flats),
        settings.bars,
    )
    rng = np.random.default_rng(settings.seed)
    voicings = generate_progression_voicings(
        chords,
        smooth=settings.smooth,
        styles=settings.effective_styles(),
        prefer_flats=settings.prefer_flats,
        rng=rng,
    )
    return template, chords, voicings


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="voicedrill")
@click.option("--verbose", "-v", is_flag=True, help="Log engine decisions to stderr.")
def main(verbose: bool) -> None:
    """voicedrill — jazz piano voicing drills with smooth voice leading."""
    setup_logging(verbose)


# ── drill subcommand ───────────────────────────────────────────────────────────

@main.command()
@_drill_options
def drill(settings_path: str | None, save_path: str | None, styles: tuple[str, ...], **overrides: Any) -> None:
    """
    Print a voiced progression, one bar per line.

    \b
    Examples:
      voicedrill drill --key Bb --progression ii-v-i-major --bars 8
      voicedrill drill -k F -p backdoor -s rootless-a -s rootless-b
      voicedrill drill --random --seed 7 --sharps
    """
    try:
        settings = _resolve_settings(settings_path, styles, **overrides)
        template, chords, voicings = _build_drill(settings)
        if save_path:
            save_settings(settings, save_path)
    except VoicedrillError as exc:
        _fail(str(exc))
        return
    except OSError as exc:
        _fail(f"Could not read or write settings — {exc}")
        return

    styles_label = ", ".join(style.value for style in settings.effective_styles())
    click.echo(f"voicedrill v{__version__}")
    click.echo(f"  Progression : {template.name}  |  Key: {settings.key}  |  Bars: {settings.bars}")
    click.echo(f"  Voicings    : {styles_label}  |  {'smooth' if settings.smooth else 'random'}")
    click.echo()

    previous: Voicing | None = None
    total_movement = 0
    for bar, (chord, voicing) in enumerate(zip(chords, voicings), start=1):
        movement = voice_leading_distance(previous, voicing) if previous is not None else 0
        total_movement += movement
        click.echo(
            f"  {bar:>2}. {chord.symbol:<10} {chord.roman:<10} {voicing.recipe.name:<16}"
            f" LH {format_notes(voicing.left_hand_notes) or '-':<16}"
            f" RH {format_notes(voicing.right_hand_notes) or '-':<16}"
            f" move {movement:>2}"
        )
        previous = voicing

    click.echo()
    click.echo(f"Total movement: {total_movement} semitones")


# ── reference subcommand ───────────────────────────────────────────────────────

@main.command()
@click.argument("chord_type", type=click.Choice([ct.value for ct in ChordType]))
@click.option("--key", "-k", "root", type=click.Choice(KEY_CHOICES), default="C",
              show_default=True, help="Chord root.")
@click.option("--flats/--sharps", "prefer_flats", default=True, show_default=True,
              help="Enharmonic spelling of note names.")
def reference(chord_type: str, root: str, prefer_flats: bool) -> None:
    """
    Show a chord type's tones and every registered voicing on ROOT.

    \b
    Examples:
      voicedrill reference m7 --key D
      voicedrill reference 7alt -k G --sharps
    """
    ct = ChordType(chord_type)
    definition = CHORD_DEFINITIONS[ct]

    click.echo(f"{root}{definition.short_name} — {definition.name}")
    click.echo(f"  {definition.description}")
    click.echo(f"  Tones    : {' '.join(INTERVAL_NAMES[i % 12] for i in definition.intervals)}")
    tensions = " ".join(degree_name(i, ct) for i in definition.tensions) or "-"
    click.echo(f"  Tensions : {tensions}")
    click.echo()

    try:
        recipes = registered_recipes(ct)
    except VoicedrillError as exc:
        _fail(str(exc))
        return

    for recipe in recipes:
        voicing = realize_voicing(root, ct, recipe, prefer_flats)
        lh_degrees = " ".join(degree_name(i, ct) for i in recipe.left_hand_intervals) or "-"
        rh_degrees = " ".join(degree_name(i, ct) for i in recipe.right_hand_intervals) or "-"
        click.echo(f"  {recipe.name} [{STYLE_NAMES[recipe.style]}]")
        click.echo(f"    LH {lh_degrees:<14} {format_notes(voicing.left_hand_notes) or '-'}")
        click.echo(f"    RH {rh_degrees:<14} {format_notes(voicing.right_hand_notes) or '-'}")
        click.echo(f"    {recipe.description}")


# ── progressions subcommand ────────────────────────────────────────────────────

@main.command()
def progressions() -> None:
    """List the progression templates."""
    for template in PROGRESSION_TEMPLATES:
        romans = " ".join(chord.symbol for chord in template.chords)
        click.echo(f"  {template.id:<22} {template.name:<28} {romans}")


# ── sheet subcommand ───────────────────────────────────────────────────────────

@main.command()
@_drill_options
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination file. Defaults to <progression>-<key> plus the format's extension.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["html", "md-vexflow"], case_sensitive=False),
    default="html",
    show_default=True,
    help="Self-contained HTML (verovio) or Markdown with a VexFlow script.",
)
def sheet(
    settings_path: str | None,
    save_path: str | None,
    styles: tuple[str, ...],
    output: str | None,
    output_format: str,
    **overrides: Any,
) -> None:
    """
    Write a printable practice sheet for a voiced progression.

    \b
    Examples:
      voicedrill sheet --key Eb --bars 8
      voicedrill sheet -p rhythm-changes-a --format md-vexflow -o rhythm.md
    """
    from voicedrill.sheet_exporter import SheetExporter

    try:
        settings = _resolve_settings(settings_path, styles, **overrides)
        template, chords, voicings = _build_drill(settings)
        if save_path:
            save_settings(settings, save_path)
    except VoicedrillError as exc:
        _fail(str(exc))
        return
    except OSError as exc:
        _fail(f"Could not read or write settings — {exc}")
        return

    normalized_format = output_format.lower()
    title = f"{template.name} in {settings.key}"
    exporter = SheetExporter(title=title, output_format=normalized_format)
    resolved_output = output or f"{template.id}-{settings.key}{exporter.renderer.default_extension}"

    click.echo(f"voicedrill v{__version__}")
    click.echo(f"  Sheet  : {title}  ({len(voicings)} bars)")
    click.echo(f"  Format : {normalized_format}")
    click.echo(f"  Output : {resolved_output}")

    try:
        exporter.export(voicings, resolved_output, chords=chords)
    except OSError as exc:
        _fail(f"Could not write output file — {exc}")
        return
    except ValueError as exc:
        _fail(f"Could not render sheet — {exc}")
        return

    click.echo()
    click.echo(f"Done!  Open '{resolved_output}' to practise.")
