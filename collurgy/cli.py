import argparse
import contextlib
import logging
import os
import sys
from pathlib import Path

from .color import color_from_hex
from .colorspace import Space, lightness_range
from .errors import CollurgyError, InvalidParameter, MissingExtra
from .export import (
    default_registry,
    dumps_preset,
    generate_readability_report,
    load_preset,
    load_scheme,
    load_template,
    print_palette,
    render,
    save_preset,
    save_scheme,
)
from .export.scheme import SCHEME_TRIPLES
from .palette import (
    DEFAULT_SCHEME,
    ConstantChroma,
    LightnessScaledChroma,
    extract_base_color,
    generate_palette,
    linear_lightness,
    terminal_palette,
)
from .theme import build_theme

logger = logging.getLogger(__name__)


def _triple(text):
    try:
        values = tuple(float(v) for v in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected L,C,H numbers, got {text!r}") from None
    if len(values) != 3:
        raise argparse.ArgumentTypeError(f"expected L,C,H numbers, got {text!r}")
    return values


def _pair(text):
    try:
        start, stop = (float(v) for v in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected START,STOP numbers, got {text!r}") from None
    return start, stop


def _extra(text):
    name, sep, index = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=INDEX, got {text!r}")
    try:
        return name, int(index)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer index in {text!r}") from None


def build_parser():
    parser = argparse.ArgumentParser(
        prog="collurgy",
        description="Generate color themes in uniform color spaces and export them through templates",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log debug output to stderr",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    # === generate ===
    gen = commands.add_parser("generate", help="Generate a theme preset")
    gen.add_argument("--name", default="collurgy", help="Theme name (default: collurgy)")
    gen.add_argument(
        "--space",
        choices=[s.value for s in Space],
        help="Color space the palette is laid out in (default: the scheme's, or cielab)",
    )
    gen.add_argument(
        "--accent",
        type=int,
        default=None,
        metavar="INDEX",
        help=f"Palette slot used as accent (default: the scheme's, {DEFAULT_SCHEME.accent}, or the last slot)",
    )
    gen.add_argument(
        "--extra",
        type=_extra,
        action="append",
        default=[],
        metavar="NAME=INDEX",
        help="Name a palette slot for templates (repeatable)",
    )
    gen.add_argument("--output", "-o", metavar="FILE", help="Write the preset here instead of stdout")
    gen.add_argument("--report", action="store_true", help="Print the palette and a contrast report")

    scheme = gen.add_argument_group("terminal scheme (16 colors, polar L,C,H)")
    scheme.add_argument("--scheme", metavar="FILE", help="Start from scheme inputs saved earlier (.json or .toml)")
    scheme.add_argument("--save-scheme", metavar="FILE", help="Save the scheme inputs for later editing")
    scheme.add_argument("--foreground", type=_triple)
    scheme.add_argument("--background", type=_triple)
    scheme.add_argument("--spectrum", type=_triple)
    scheme.add_argument("--spectrum-bright", type=_triple)

    seeded = gen.add_argument_group("seeded palette")
    seed = seeded.add_mutually_exclusive_group()
    seed.add_argument("--base", metavar="HEX", help="Base color the palette hue is anchored on")
    seed.add_argument("--from-image", metavar="PATH", help="Take the base color from an image")
    seeded.add_argument("--size", type=int, default=16, help="Number of colors (default: 16)")
    seeded.add_argument(
        "--lightness",
        type=_pair,
        metavar="START,STOP",
        help="Lightness ramp in space units (default: 10%% to 95%% of the space's range)",
    )
    chroma = seeded.add_mutually_exclusive_group()
    chroma.add_argument("--chroma", type=float, help="Constant chroma (default: the base color's)")
    chroma.add_argument(
        "--scaled-chroma",
        type=float,
        metavar="PEAK",
        help="Chroma peaking at mid lightness, fading toward black and white",
    )

    # === render ===
    ren = commands.add_parser("render", help="Render a preset through an exporter template")
    ren.add_argument("preset", help="Preset file (.json or .toml)")
    ren.add_argument("template", help="Template name, or path to a template source file")
    _add_template_options(ren)
    ren.add_argument("--output", "-o", metavar="FILE", help="Write here instead of stdout")

    # === list ===
    lst = commands.add_parser("list", help="List exporter templates")
    _add_template_options(lst)

    # === export-all ===
    exp = commands.add_parser("export-all", help="Render a preset through every template")
    exp.add_argument("preset", help="Preset file (.json or .toml)")
    exp.add_argument("--output", "-o", metavar="DIR", required=True, help="Output directory")
    _add_template_options(exp)

    return parser


def _add_template_options(parser):
    parser.add_argument(
        "--templates",
        metavar="DIR",
        action="append",
        default=[],
        help="Directory of user templates; overrides built-ins (repeatable)",
    )
    parser.add_argument(
        "--suggested-extras",
        action="store_true",
        help="Fill extras the preset lacks from the template's suggested slots",
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "generate": _run_generate,
        "render": _run_render,
        "list": _run_list,
        "export-all": _run_export_all,
    }
    try:
        return handlers[args.command](args)
    except (CollurgyError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


def _terminal_scheme(args):
    """The scheme to generate from: a saved file or the defaults, then flags."""
    scheme, space = DEFAULT_SCHEME, Space.CIELAB
    if args.scheme:
        scheme, space = load_scheme(args.scheme)
    if args.space:
        space = Space.from_name(args.space)

    overrides = {
        field: getattr(args, field)
        for field in SCHEME_TRIPLES
        if getattr(args, field) is not None
    }
    if args.accent is not None:
        overrides["accent"] = args.accent
    return scheme._replace(**overrides), space


def _seeded_palette(args):
    space = Space.from_name(args.space or Space.CIELAB)

    if args.from_image:
        print(f"Analyzing: {args.from_image}", file=sys.stderr)
        base = extract_base_color(args.from_image)
        print(f"Base color: {base.hex}", file=sys.stderr)
    else:
        base = color_from_hex(args.base)

    if args.lightness is None:
        black, white = lightness_range(space)
        start = black + (white - black) * 0.10
        stop = black + (white - black) * 0.95
    else:
        start, stop = args.lightness

    if args.scaled_chroma is not None:
        chroma_policy = LightnessScaledChroma(args.scaled_chroma)
    elif args.chroma is not None:
        chroma_policy = ConstantChroma(args.chroma)
    else:
        chroma_policy = None

    return generate_palette(
        base,
        space,
        args.size,
        linear_lightness(args.size, start, stop),
        chroma_policy=chroma_policy,
    )


def _run_generate(args):
    """Generate a palette, bind it into a theme and emit the preset."""
    # Status lines go to stderr when the preset itself goes to stdout
    out = sys.stdout if args.output else sys.stderr

    scheme = space = None
    if args.base is None and args.from_image is None:
        scheme, space = _terminal_scheme(args)
        palette = terminal_palette(scheme, space)
        accent_index = scheme.accent
    else:
        if args.scheme or args.save_scheme:
            raise InvalidParameter(
                "--scheme and --save-scheme apply to the terminal scheme, not --base or --from-image"
            )
        palette = _seeded_palette(args)
        accent_index = args.accent
        if accent_index is None:
            accent_index = min(DEFAULT_SCHEME.accent, len(palette) - 1)

    if not 0 <= accent_index < len(palette):
        raise InvalidParameter(f"accent slot {accent_index} is outside a palette of {len(palette)} colors")

    theme = build_theme(args.name, palette, palette[accent_index], args.extra)

    if args.save_scheme:
        os.makedirs(os.path.dirname(args.save_scheme) or ".", exist_ok=True)
        save_scheme(scheme, args.save_scheme, space)
        print(f"Exported: {args.save_scheme}", file=out)

    if args.report:
        with contextlib.redirect_stdout(out):
            print_palette(theme)
            report, _ = generate_readability_report(theme)
            print("\n" + report)

    if args.output:
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        save_preset(theme, args.output)
        print(f"Exported: {args.output}")
    else:
        print(dumps_preset(theme))
    return 0


def _resolve_template(name, registry):
    if name in registry:
        return registry.get(name)
    path = Path(name)
    if path.suffix and path.exists():
        return load_template(path)
    return registry.get(name)


def _prepare(theme, template, args):
    if args.suggested_extras:
        return theme.with_extras(template.suggested_extras)
    return theme


def _run_render(args):
    registry = default_registry(args.templates)
    theme = load_preset(args.preset)
    template = _resolve_template(args.template, registry)

    rendered = render(template, _prepare(theme, template, args))

    if args.output:
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(rendered.text)
        print(f"Exported: {args.output}")
        if rendered.path:
            print(f"Usual location: {rendered.path}")
    else:
        sys.stdout.write(rendered.text)
    return 0


def _run_list(args):
    registry = default_registry(args.templates)
    for template in registry:
        extras = ", ".join(sorted(template.extras)) or "-"
        print(f"{template.name:16} {template.path or '-':48} extras: {extras}")
    return 0


def _run_export_all(args):
    """Render one preset through every registered template."""
    registry = default_registry(args.templates)
    theme = load_preset(args.preset)
    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    exported = []
    failed = []
    for template in registry:
        try:
            rendered = render(template, _prepare(theme, template, args))
        except MissingExtra as e:
            print(f"Skipping {template.name}: {e}", file=sys.stderr)
            failed.append(template.name)
            continue
        except CollurgyError as e:
            print(f"Error rendering {template.name}: {e}", file=sys.stderr)
            failed.append(template.name)
            continue

        filename = Path(rendered.path).name if rendered.path else f"{template.name}.txt"
        target = output_dir / filename
        if target in exported:
            renamed = output_dir / f"{template.name}-{filename}"
            logger.warning(
                "%s would overwrite %s; writing %s instead", template.name, target, renamed
            )
            target = renamed
        with open(target, "w", encoding="utf-8") as f:
            f.write(rendered.text)
        logger.debug("Rendered %s to %s", template.name, target)
        exported.append(target)

    print("\n" + "=" * 60)
    print("Exported:")
    for path in exported:
        print(f"  - {path}")
    if failed:
        print(f"Failed: {', '.join(failed)}")
    print("=" * 60)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
