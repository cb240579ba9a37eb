import os
import pandas as pd
from optimize_path import run_from_config, load_config, DEFAULTS

def run_batch(inputs, configs=None, out_dir='runs'):
    """
    Run every input file under every config; one reordered file per (config, input).

    Jobs are numbered so inputs sharing a basename, or configs sharing a tag,
    get their own output file and run directory.
    """
    summaries = []
    job = 0
    for cfg_path in (configs or [None]):
        base = load_config(cfg_path) if cfg_path else {}
        tag = base.get('tag', DEFAULTS['tag'])
        for inp in inputs:
            stem = os.path.splitext(os.path.basename(inp))[0]
            cfg = dict(base)
            cfg['tag'] = f"{tag}{job:03d}"
            cfg['input'] = inp
            cfg['output'] = os.path.join(out_dir, f"{cfg['tag']}_{stem}_ordered.csv")
            cfg['out_dir'] = out_dir
            cfg['save_json'] = True
            summary = run_from_config(cfg)
            summary['config'] = cfg_path or ''
            summaries.append(summary)
            job += 1
    df = pd.DataFrame(summaries)
    os.makedirs(out_dir, exist_ok=True)
    csv_path = os.path.join(out_dir, "summary.csv")
    df.to_csv(csv_path, index=False)
    print(f"Saved: {csv_path}")
    return df

if __name__ == '__main__':
    import argparse
    ap = argparse.ArgumentParser()
    ap.add_argument('--inputs', nargs='+', required=True)
    ap.add_argument('--configs', nargs='+', default=None)
    ap.add_argument('--out_dir', default='runs')
    args = ap.parse_args()
    df = run_batch(args.inputs, args.configs, args.out_dir)
    print(df[['input', 'method', 'initial_length', 'optimized_length', 'reduction_pct']].to_string(index=False))
