from ..color import contrast_ratio

MIN_TEXT_CONTRAST = 4.0  # Every slot against the background


def _slot_label(theme, index):
    names = sorted(name for name, slot in theme.extras.items() if slot == index)
    label = f"color{index}"
    if names:
        label += f" ({', '.join(names)})"
    return label


def generate_readability_report(theme, min_contrast=MIN_TEXT_CONTRAST):
    """Generate a readability report of every slot against slot 0.

    Args:
        theme: The theme to inspect
        min_contrast: Contrast ratio a slot needs to pass

    Returns:
        tuple: (report text, list of (label, hex, achieved, required))
    """
    bg = theme.palette[0]

    report = []
    report.append("=" * 70)
    report.append("READABILITY REPORT")
    report.append("=" * 70)
    report.append(f"Theme: {theme.name}")
    report.append(f"Background: {bg.hex} (L: {bg.oklab[0]:.3f})")
    report.append(f"\nSLOTS (min: {min_contrast}:1)")
    report.append("-" * 50)

    issues = []
    entries = [(_slot_label(theme, i), c) for i, c in enumerate(theme.palette) if i]
    entries.append(("accent", theme.accent))

    for label, c in entries:
        cr = contrast_ratio(c.luminance, bg.luminance)
        status = "✓" if cr >= min_contrast else "✗ FAIL"
        if cr < min_contrast:
            issues.append((label, c.hex, cr, min_contrast))
        report.append(f"  {label:24} {c.hex}  vs bg: {cr:4.1f}:1  {status}")

    report.append("\n" + "=" * 70)
    if issues:
        report.append(f"ISSUES FOUND: {len(issues)}")
        for label, hex_val, achieved, required in issues:
            report.append(f"  - {label}: {hex_val} has {achieved:.1f}:1, needs {required}:1")
    else:
        report.append("ALL COLORS PASS CONTRAST REQUIREMENTS ✓")
    report.append("=" * 70)

    return "\n".join(report), issues


def print_palette(theme):
    """Print palette info"""
    bg = theme.palette[0]

    print("\n" + "=" * 60)
    print(f"PALETTE: {theme.name} ({len(theme.palette)} colors)")
    print("=" * 60)
    for i, c in enumerate(theme.palette):
        contrast = contrast_ratio(c.luminance, bg.luminance)
        print(f"  {_slot_label(theme, i):24} {c.hex}  (contrast: {contrast:.1f}:1)")
    contrast = contrast_ratio(theme.accent.luminance, bg.luminance)
    print(f"  {'accent':24} {theme.accent.hex}  (contrast: {contrast:.1f}:1)")
