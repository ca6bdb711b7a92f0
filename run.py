import os
import yaml
import argparse
from datetime import datetime

from segtree.workload import WorkloadRunner


def run(args):
    with open(args.config) as f:
        config = yaml.load(f, Loader=yaml.SafeLoader)

    monoid = config.pop('monoid')
    if args.num_steps is not None:
        config['num_steps'] = args.num_steps

    # Specify the directory to log.
    name = os.path.splitext(os.path.basename(args.config))[0]
    time = datetime.now().strftime("%Y%m%d-%H%M")
    log_dir = os.path.join(
        'logs', monoid, f'{name}-seed{args.seed}-{time}')

    runner = WorkloadRunner(
        monoid=monoid, log_dir=log_dir, seed=args.seed, **config)
    mismatches = runner.run()
    print(f'Finished {runner.steps} steps with {mismatches} mismatches.')
    return 1 if mismatches else 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument(
        '--config', type=str, default=os.path.join('config', 'sum.yaml'))
    parser.add_argument('--num_steps', type=int, default=None)
    parser.add_argument('--seed', type=int, default=0)
    args = parser.parse_args()
    raise SystemExit(run(args))
