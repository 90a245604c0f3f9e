from __future__ import annotations
import argparse
import logging
import os

from colldeco.engine.chain import build_buffer_from_yaml
from colldeco.engine.decorator import layer_types
from colldeco.engine.metrics import Metrics
from colldeco.engine.replay import RunArtifact
from colldeco.engine.workload import Workload

SAMPLE = """name: ints_blocking
buffer:
  store: bounded_fifo
  capacity: 500
  decorators:
    - type: typed
      kind: int
    - type: predicated
      predicate: non_negative
    - type: transformed
      transform: double
    - type: blocking
      timeout_s: 0.5
      notify_all: false
workload:
  producers: 4
  consumers: 4
  items_per_producer: 250
  poll_timeout_s: 0.05
  negative_prob: 0.05
  rng_seed: 123
"""

def cmd_init() -> None:
    os.makedirs("chain_examples", exist_ok=True)
    out = os.path.join("chain_examples", "ints_blocking.yaml")
    if not os.path.exists(out):
        with open(out, "w", encoding="utf-8") as f:
            f.write(SAMPLE)
    print(f"Wrote {out}")

def cmd_run(chain_path: str, runs_dir: str) -> None:
    metrics = Metrics()
    buf, cfg = build_buffer_from_yaml(chain_path, metrics=metrics)
    name = cfg.get("name", "chain")
    print("Chain:", " -> ".join(t.__name__ for t in layer_types(buf)))

    workload = Workload.from_config(name, buf, cfg.get("workload", {}), metrics=metrics)
    artifact = workload.run()

    # attach snapshot for replay/debug
    artifact.config_snapshot = cfg

    out_path = os.path.join(runs_dir, f"{artifact.run_id}.json")
    artifact.save(out_path)
    print(f"Run saved: {out_path}")
    print("Summary:", artifact.metrics["counters"])

def cmd_report(run_path: str) -> None:
    artifact = RunArtifact.load(run_path)
    m = artifact.metrics
    print(f"Chain:    {artifact.chain_name}")
    print(f"Run ID:   {artifact.run_id}")
    print(f"Duration: {m.get('duration_s'):.3f}s")
    print("Counters:")
    for k, v in sorted(m.get("counters", {}).items()):
        print(f"  {k}: {v}")
    lat = m.get("latency_ms", {})
    print("Latency(ms):", lat)

def main(argv: list[str] | None = None) -> None:
    ap = argparse.ArgumentParser(prog="colldeco")
    ap.add_argument("--log-level", default="WARNING", help="DEBUG, INFO, WARNING, ...")
    sub = ap.add_subparsers(dest="cmd", required=True)

    sub.add_parser("init")

    runp = sub.add_parser("run")
    runp.add_argument("chain", help="YAML chain config path")
    runp.add_argument("--runs-dir", default="runs")

    rep = sub.add_parser("report")
    rep.add_argument("runfile", help="Path to a run json artifact")

    args = ap.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s",
    )

    if args.cmd == "init":
        cmd_init()
    elif args.cmd == "run":
        cmd_run(args.chain, args.runs_dir)
    elif args.cmd == "report":
        cmd_report(args.runfile)

if __name__ == "__main__":
    main()
