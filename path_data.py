import io
import numpy as np
import pandas as pd

AXES = ('X', 'Y', 'Z')

def _is_number(s):
    try:
        float(s)
        return True
    except ValueError:
        return False

def points_from_array(coords, labels=None, lines=None):
    coords = np.array(coords, dtype=float)
    if coords.ndim != 2 or coords.shape[1] not in (2, 3):
        raise ValueError(f"coords must have shape (n, 2) or (n, 3), got {coords.shape}")
    if not np.all(np.isfinite(coords)):
        raise ValueError('coordinates must be finite')
    n = len(coords)
    labels = [''] * n if labels is None else ['' if l is None else str(l) for l in labels]
    if len(labels) != n:
        raise ValueError(f"{len(labels)} labels for {n} points")
    if lines is None:
        lines = [','.join([l] + [repr(float(v)) for v in c]) for l, c in zip(labels, coords)]
    coords.setflags(write=False)
    return {'labels': labels, 'coords': coords, 'lines': list(lines)}

def _table(rows, sep):
    # rows are kept (stripped) lines; names wide enough for the longest row
    if sep == ',':
        width = max(r.count(',') for r in rows) + 1
    else:
        width = max(len(r.split()) for r in rows)
    df = pd.read_csv(io.StringIO('\n'.join(rows)), sep=sep, header=None, names=list(range(width)),
                     dtype=str, keep_default_na=False, skipinitialspace=True,
                     skip_blank_lines=False, quotechar='"')
    if len(df) != len(rows):
        raise ValueError(f"could not split {len(rows)} rows into fields (unbalanced quotes?)")
    table = []
    for rec in df.itertuples(index=False):
        fields = ['' if pd.isna(v) else str(v).strip() for v in rec]
        while fields and fields[-1] == '':
            fields.pop()
        table.append(fields)
    return table

def read_points(path, dim=3):
    """
    Read labelled points from a CSV or whitespace separated text file.

    Accepted rows (dim=3):  label,X,Y,Z   |   X,Y,Z   |   label X Y Z   |   X Y Z
    Fields may be double-quoted ("P1","0","0","0").
    Blank lines, '#' comments and a non-numeric header line are skipped.
    A row with dim+1 fields always takes the first field as the label.
    The file is comma separated if any row holds a comma, whitespace separated otherwise.

    Returns {'labels': [str], 'coords': (n, dim) read-only array, 'lines': [raw row text]}.
    """
    if dim not in (2, 3):
        raise ValueError(f"dim must be 2 or 3, got {dim}")
    kept = []
    with open(path, 'r', encoding='utf-8') as f:
        for lineno, raw in enumerate(f, 1):
            line = raw.rstrip('\r\n')
            s = line.strip()
            if s and not s.startswith('#'):
                kept.append((lineno, line, s))
    labels, rows, lines = [], [], []
    if kept:
        stripped = [s for _, _, s in kept]
        sep = ',' if any(',' in s for s in stripped) else r'\s+'
        for (lineno, line, s), fields in zip(kept, _table(stripped, sep)):
            numeric = [_is_number(x) for x in fields]
            if len(fields) == dim and all(numeric):
                label, vals = '', fields
            elif len(fields) == dim+1 and all(numeric[1:]):
                label, vals = fields[0], fields[1:]
            elif not rows and not any(numeric):
                continue  # header
            else:
                raise ValueError(f"{path}:{lineno}: expected {dim} coordinates "
                                 f"(optionally preceded by a label), got {s!r}")
            xyz = [float(v) for v in vals]
            if not all(np.isfinite(xyz)):
                raise ValueError(f"{path}:{lineno}: non-finite coordinate in {s!r}")
            labels.append(label); rows.append(xyz); lines.append(line)
    coords = np.array(rows, dtype=float).reshape(len(rows), dim)
    coords.setflags(write=False)
    return {'labels': labels, 'coords': coords, 'lines': lines}

def reorder(items, order):
    return [items[i] for i in order]

def write_reordered(path, points, order):
    coords = points['coords']
    dim = coords.shape[1]
    df = pd.DataFrame(coords[list(order)], columns=list(AXES[:dim]))
    df.insert(0, 'label', reorder(points['labels'], order))
    df.to_csv(path, header=False, index=False)
    return path

def write_raw_lines(path, points, order):
    with open(path, 'w', encoding='utf-8') as f:
        for line in reorder(points['lines'], order):
            f.write(line + '\n')
    return path

def generate_instance(N=50, seed=1, dim=3, scale=100.0):
    rng = np.random.default_rng(seed)
    coords = rng.random((N, dim)) * scale
    return points_from_array(coords, labels=[f"P{i}" for i in range(N)])
