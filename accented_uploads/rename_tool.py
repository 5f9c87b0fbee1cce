"""rename_tool.py

Sanitize accented filenames already stored on disk, in two steps:

- Dry-run: walk the uploads tree and propose ascii names, repairing known
  double-encoding errors first. Writes `moves_map_suggested.tsv`.

- Apply: read the map and rename every file with recover(), which also
  finds files stored under an nfd/nfc variant or a double-encoded name.
  Writes `moves_map_applied.tsv` with the path that was actually renamed
  (use it as the literal old string when updating references) and appends
  to `rename_apply.log`.

Usage examples:

  # produce suggestions only
  accented-uploads --root wp-content/uploads --dry-run

  # apply previously suggested map
  accented-uploads --root wp-content/uploads --apply

  # extra encoding fixes, one `corrupted<TAB>correct` pair per line
  accented-uploads --root uploads --dry-run --apply --fixes fixes.tsv

"""
from pathlib import Path
import argparse
import logging
import os
import sys
import time

from .mojibake import DEFAULT_TABLE, load_rule_file
from .recovery import recover
from .stripper import strip_accents

SUGGESTED_MAP = 'moves_map_suggested.tsv'
APPLIED_MAP = 'moves_map_applied.tsv'
LOG_FILE = 'rename_apply.log'
EXCLUDE_DIRS = {".git", ".venv", "__pycache__", "venv", "node_modules"}
CONTROL_FILES = {SUGGESTED_MAP, APPLIED_MAP, LOG_FILE}


def should_skip(rel: Path) -> bool:
    if any(p in EXCLUDE_DIRS or p.startswith('.') for p in rel.parts):
        return True
    return rel.name in CONTROL_FILES


def propose_new_name(name: str, table=DEFAULT_TABLE, sanitize=True, lowercase=True) -> str:
    new_name = strip_accents(table.repair(name), sanitize_special_chars=sanitize)
    if lowercase:
        new_name = new_name.lower()
    return new_name


def _dedupe(parent: Path, new_name: str, used: set) -> Path:
    candidate = parent / new_name
    stem, ext = os.path.splitext(new_name)
    i = 1
    while str(candidate) in used:
        candidate = parent / f"{stem}-{i}{ext}"
        i += 1
    used.add(str(candidate))
    return candidate


def scan_and_suggest(root: Path, out_map: Path, table=DEFAULT_TABLE, sanitize=True, lowercase=True):
    files = sorted(p for p in root.rglob('*') if p.is_file())
    used = {str(p.relative_to(root)) for p in files}
    suggestions = []
    for p in files:
        rel = p.relative_to(root)
        if should_skip(rel):
            continue
        new_name = propose_new_name(p.name, table, sanitize, lowercase)
        if new_name == p.name:
            continue
        new_rel = _dedupe(rel.parent, new_name, used)
        suggestions.append((str(rel), str(new_rel)))

    with out_map.open('w', encoding='utf-8') as f:
        f.write('# old\tnew\n')
        for old, new in suggestions:
            f.write(f"{old}\t{new}\n")

    print(f"Scanned {len(files)} files; suggestions: {len(suggestions)}")
    return suggestions


def load_map(map_file: Path):
    pairs = []
    if not map_file.exists():
        print('Suggested map not found:', map_file)
        return pairs
    with map_file.open('r', encoding='utf-8') as f:
        for line in f:
            line = line.rstrip('\r\n')
            if not line.strip() or line.startswith('#'):
                continue
            parts = line.split('\t')
            if len(parts) >= 2:
                pairs.append((parts[0], parts[1]))
    return pairs


def apply_map(root: Path, pairs, table=DEFAULT_TABLE):
    applied = []
    skipped = []
    for old_rel, new_rel in pairs:
        old = root / old_rel
        new = root / new_rel
        try:
            new.parent.mkdir(parents=True, exist_ok=True)
            result = recover(old, new, table)
        except OSError as e:
            # not one of the per-attempt failures: stop the whole batch
            skipped.append((old_rel, new_rel, f'error:{e}'))
            print(f'ABORTED: {old_rel}: {e}')
            break
        if result.succeeded:
            matched = os.path.relpath(result.old_path, root)
            applied.append((matched, new_rel))
            print(f'APPLIED: {matched} -> {new_rel}')
        elif new.exists():
            skipped.append((old_rel, new_rel, 'already_done'))
        else:
            skipped.append((old_rel, new_rel, 'not_found'))
    for old_rel, new_rel, reason in skipped:
        print(f'SKIPPED: {old_rel} -> {new_rel} ({reason})')
    return applied, skipped


def write_applied_map(applied_list, out_path: Path):
    exists = out_path.exists()
    with out_path.open('a', encoding='utf-8') as f:
        if not exists:
            f.write('# old\tnew\n')
        for o, n in applied_list:
            f.write(f"{o}\t{n}\n")


def write_log(log_path: Path, applied, skipped):
    with log_path.open('a', encoding='utf-8') as lf:
        lf.write(f'Run at {time.asctime()}\n')
        lf.write(f'Applied: {len(applied)}; Skipped: {len(skipped)}\n')
        for o, n in applied:
            lf.write(f'APPLIED: {o} -> {n}\n')
        for o, n, reason in skipped:
            lf.write(f'SKIPPED: {o} -> {n} ({reason})\n')
        lf.write('\n')


def build_table(fixes):
    table = DEFAULT_TABLE
    extra = []
    for fixes_file in fixes or []:
        extra.extend(load_rule_file(fixes_file))
    if extra:
        table = table.extend(extra)
    return table


def main(argv=None):
    p = argparse.ArgumentParser(prog='accented-uploads', description='Remove accents from uploaded filenames')
    p.add_argument('--root', type=Path, default=Path.cwd(), help='Directory holding the uploads (default: current directory)')
    p.add_argument('--dry-run', action='store_true', help=f'Scan and propose renames (writes {SUGGESTED_MAP})')
    p.add_argument('--apply', action='store_true', help='Apply renames from the moves map')
    p.add_argument('--map', type=Path, help=f'Moves map to write/read (default: <root>/{SUGGESTED_MAP})')
    p.add_argument('--fixes', action='append', type=Path, help='Extra encoding fixes, tab separated; may be repeated')
    p.add_argument('--no-sanitize', action='store_true', help='Only strip accents, keep other special characters')
    p.add_argument('--keep-case', action='store_true', help='Do not lowercase the new names')
    p.add_argument('-v', '--verbose', action='store_true', help='Log every rename attempt')
    args = p.parse_args(argv)

    if not args.dry_run and not args.apply:
        p.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    root = args.root.resolve()
    suggested_map = args.map or root / SUGGESTED_MAP
    table = build_table(args.fixes)

    if args.dry_run:
        scan_and_suggest(root, suggested_map, table, sanitize=not args.no_sanitize, lowercase=not args.keep_case)

    if args.apply:
        pairs = load_map(suggested_map)
        if not pairs:
            print('No suggested pairs to apply. Run --dry-run first or provide a moves map.')
            return 1
        applied, skipped = apply_map(root, pairs, table)
        if applied:
            write_applied_map(applied, root / APPLIED_MAP)
        write_log(root / LOG_FILE, applied, skipped)
        if any(reason.startswith('error:') for _, _, reason in skipped):
            return 2

    print('Done.')
    return 0


if __name__ == '__main__':
    sys.exit(main())
