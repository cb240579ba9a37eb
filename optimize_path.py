# optimize_path.py
# Reorder measured points (CMM scans, probe/machining point lists) so the path between
# consecutive points is short: nearest neighbour construction and/or 2-opt refinement.
#
#   python optimize_path.py input.csv output.csv [--config config.json] [--mode xy] ...
import os, json, argparse
import pandas as pd

from path_data import read_points, write_reordered, write_raw_lines
from path_heuristics import optimize

DEFAULTS = {
    'dim': 3,
    'mode': '3d',
    'construct': 'nn',
    'refine': True,
    'max_passes': None,
    'method': 'delta',
    'raw_lines': False,
    'plot': False,
    'show': False,
    'plot_dir': None,
    'save_json': False,
    'out_dir': 'runs',
    'tag': 'path',
}

def method_name(construct, refine):
    base = 'NN' if construct == 'nn' else 'Input order'
    return base + ('+2opt' if refine else '')

def run(
    input_path, output_path, dim=3, mode='3d', construct='nn', refine=True,
    max_passes=None, method='delta', raw_lines=False, plot=False, show=False,
    plot_dir=None, save_json=False, out_dir='runs', tag='path'
):
    if not os.path.exists(input_path):
        raise SystemExit(f"Error: cannot open input file {input_path}")
    points = read_points(input_path, dim=dim)
    n = len(points['coords'])
    if n == 0:
        raise SystemExit(f"Error: no points read from {input_path}")
    print(f"Read {n} points from {input_path}")

    res = optimize(points['coords'], mode=mode, construct=construct, refine=refine,
                   max_passes=max_passes, method=method)
    orig_len, opt_len = res['original_length'], res['optimized_length']
    gain = 100.0 * (orig_len - opt_len) / orig_len if orig_len > 0 else 0.0
    print(f"Initial path length = {orig_len:.6g}")
    if construct == 'nn' and refine:
        print(f"Nearest neighbour path length = {res['constructed_length']:.6g}")
    print(f"Optimized path length = {opt_len:.6g}")
    print(f"Reduction = {gain:.2f}% ({res['passes']} 2-opt passes, {res['moves']} moves)")

    d = os.path.dirname(output_path)
    if d:
        os.makedirs(d, exist_ok=True)
    if raw_lines:
        write_raw_lines(output_path, points, res['order'])
    else:
        write_reordered(output_path, points, res['order'])
    print(f"Wrote reordered points to {output_path}")

    stem = os.path.splitext(os.path.basename(input_path))[0]
    summary = {'input': input_path, 'output': output_path, 'n': n,
               'method': method_name(construct, refine), 'mode': mode,
               'initial_length': orig_len, 'optimized_length': opt_len,
               'reduction_pct': gain, 'passes': res['passes'], 'moves': res['moves']}

    run_dir = None
    if save_json or ((plot or show) and plot_dir is None):
        run_dir = os.path.join(out_dir, f"{tag}_{stem}")
        os.makedirs(run_dir, exist_ok=True)
    if save_json:
        df = pd.DataFrame([
            {'method': 'Input order', 'length': orig_len},
            {'method': summary['method'], 'length': opt_len},
        ])
        csv_path = os.path.join(run_dir, "results.csv")
        df.to_csv(csv_path, index=False)
        print(f"Saved: {csv_path}")
        sol = {
            'input': input_path, 'dim': int(dim), 'mode': mode,
            'construct': construct, 'refine': bool(refine),
            'labels': points['labels'], 'coords': points['coords'].tolist(),
            'original_order': res['original_order'], 'order': res['order'],
            'original_length': float(orig_len), 'optimized_length': float(opt_len),
            'passes': int(res['passes']), 'moves': int(res['moves']),
        }
        json_path = os.path.join(run_dir, "solution.json")
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(sol, f)
        print(f"Saved: {json_path}")
        summary['run_dir'] = run_dir

    if plot or show:
        # imported here so headless runs never touch matplotlib
        from visualize_paths import main as plot_paths
        pdir = plot_dir or run_dir
        os.makedirs(pdir, exist_ok=True)
        summary['plots'] = plot_paths(points['coords'], res['original_order'], res['order'],
                                      os.path.join(pdir, stem), show=show)
    return summary

def run_from_config(cfg):
    opt = lambda k: cfg.get(k, DEFAULTS[k])
    max_passes = opt('max_passes')
    return run(
        cfg['input'], cfg['output'],
        dim=int(opt('dim')), mode=opt('mode'), construct=opt('construct'),
        refine=bool(opt('refine')),
        max_passes=None if max_passes is None else int(max_passes),
        method=opt('method'), raw_lines=bool(opt('raw_lines')),
        plot=bool(opt('plot')), show=bool(opt('show')), plot_dir=opt('plot_dir'),
        save_json=bool(opt('save_json')), out_dir=opt('out_dir'), tag=opt('tag'),
    )

def load_config(path='config.json'):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)

def build_parser():
    ap = argparse.ArgumentParser(description='Reorder points to shorten the path through them.')
    ap.add_argument('input')
    ap.add_argument('output')
    ap.add_argument('--config', type=str, default=None)
    # CLI flags override the config file; None means "not given"
    ap.add_argument('--dim', type=int, choices=[2, 3], default=None)
    ap.add_argument('--mode', choices=['3d', 'xy'], default=None)
    ap.add_argument('--construct', choices=['nn', 'identity'], default=None)
    ap.add_argument('--no_refine', dest='refine', action='store_false', default=None)
    ap.add_argument('--max_passes', type=int, default=None)
    ap.add_argument('--method', choices=['delta', 'full'], default=None)
    ap.add_argument('--raw_lines', action='store_true', default=None)
    ap.add_argument('--plot', action='store_true', default=None)
    ap.add_argument('--show', action='store_true', default=None)
    ap.add_argument('--plot_dir', type=str, default=None)
    ap.add_argument('--save_json', action='store_true', default=None)
    ap.add_argument('--out_dir', type=str, default=None)
    ap.add_argument('--tag', type=str, default=None)
    return ap

def config_from_args(args):
    cfg = load_config(args.config) if args.config else {}
    cfg.update({k: v for k, v in vars(args).items() if v is not None and k != 'config'})
    return cfg

if __name__ == '__main__':
    args = build_parser().parse_args()
    run_from_config(config_from_args(args))
