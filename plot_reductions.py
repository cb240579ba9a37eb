# plot_reductions.py
# Before/after path length per input, read from the summary.csv files written by optimize_batch.py.
import argparse, glob, os
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

COLUMNS = ['input', 'method', 'initial_length', 'optimized_length', 'reduction_pct']

def load_summaries(pattern):
    files = sorted(glob.glob(pattern))
    if not files:
        raise SystemExit(f'No summary files match: {pattern}')
    df = pd.concat([pd.read_csv(p) for p in files], ignore_index=True)
    missing = [c for c in COLUMNS if c not in df]
    if missing:
        raise ValueError(f'summary CSV is missing columns: {missing}')
    # one bar pair per (input, method) row; the output name tells repeated basenames apart
    name_col = 'output' if 'output' in df else 'input'
    df['run'] = [os.path.splitext(os.path.basename(p))[0] for p in df[name_col]]
    return df

def plot_before_after(ax, df):
    y = np.arange(len(df))
    h = 0.4
    ax.barh(y - h/2, df['initial_length'], height=h, color='red', label='Original order')
    ax.barh(y + h/2, df['optimized_length'], height=h, color='blue', label='Optimized')
    for yi, (_, row) in zip(y, df.iterrows()):
        ax.annotate(f"-{row['reduction_pct']:.1f}%", (row['optimized_length'], yi + h/2),
                    xytext=(4, 0), textcoords='offset points', va='center', fontsize=8)
    ax.set_yticks(y)
    ax.set_yticklabels([f"{r} ({m})" for r, m in zip(df['run'], df['method'])])
    ax.invert_yaxis()
    ax.set_xlabel('Path length')
    ax.legend()

def main(pattern, out_png=None):
    df = load_summaries(pattern)
    fig, ax = plt.subplots(figsize=(8, max(3, 0.5 * len(df) + 1)))
    plot_before_after(ax, df)
    ax.set_title('Path length before and after reordering')
    out = out_png or 'path_reductions.png'
    fig.savefig(out, bbox_inches='tight', dpi=150)
    plt.close(fig)
    print(f'Saved plot: {out}')
    by_method = df.groupby('method')['reduction_pct'].agg(['count', 'mean', 'min', 'max'])
    print(by_method.to_string(float_format=lambda v: f"{v:.2f}"))
    return by_method

if __name__ == '__main__':
    ap = argparse.ArgumentParser()
    ap.add_argument('pattern', help='Glob for summary CSVs, e.g. "runs/summary.csv"')
    ap.add_argument('--out', default=None)
    args = ap.parse_args()
    main(args.pattern, args.out)
