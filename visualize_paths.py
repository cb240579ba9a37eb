import argparse, json
import numpy as np
import matplotlib.pyplot as plt

ORIGINAL_STYLE = dict(color='red', marker='o', label='Original Path')
OPTIMIZED_STYLE = dict(color='blue', marker='s', label='Optimized Path')

def plot_path(ax, xy, order, color='blue', marker='o', label=None):
    xs = [xy[i][0] for i in order]
    ys = [xy[i][1] for i in order]
    line, = ax.plot(xs, ys, linestyle='-', linewidth=2, color=color, marker=marker, ms=4, label=label)
    return line

def _figure(xy, orders_styles, title, figsize=(8, 6)):
    fig = plt.figure(figsize=figsize)
    ax = fig.gca()
    for order, style in orders_styles:
        plot_path(ax, xy, order, **style)
    ax.set_title(title)
    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    ax.legend()
    return fig

def plot_comparison(coords, original_order, optimized_order):
    """Build the three figures: original, optimized, both superimposed. Uses only X,Y."""
    xy = np.asarray(coords, dtype=float)[:, :2]
    return [
        ('original', _figure(xy, [(original_order, ORIGINAL_STYLE)], 'Original Path')),
        ('optimized', _figure(xy, [(optimized_order, OPTIMIZED_STYLE)], 'Optimized Path')),
        ('comparison', _figure(xy, [(original_order, ORIGINAL_STYLE), (optimized_order, OPTIMIZED_STYLE)],
                               'Original (Red) vs Optimized (Blue)', figsize=(9, 7))),
    ]

def main(coords, original_order, optimized_order, out_prefix, show=False):
    figs = plot_comparison(coords, original_order, optimized_order)
    saved = []
    for name, fig in figs:
        out = f"{out_prefix}_{name}.png"
        fig.savefig(out, bbox_inches='tight', dpi=150)
        print(f'Saved: {out}')
        saved.append(out)
    if show:
        plt.show()
    for _, fig in figs:
        plt.close(fig)
    return saved

if __name__ == '__main__':
    ap = argparse.ArgumentParser()
    ap.add_argument('solution_json', help='solution.json written by optimize_path.py --save_json')
    ap.add_argument('--show', action='store_true')
    args = ap.parse_args()
    with open(args.solution_json, 'r', encoding='utf-8') as f:
        sol = json.load(f)
    main(sol['coords'], sol['original_order'], sol['order'],
         args.solution_json.replace('.json', ''), show=args.show)
