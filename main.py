"""
LDC SIMPLE solver - entry point for solving, exporting and plotting.

Usage:
    python main.py
    python main.py N=40 Re=400
    python main.py mlflow.enabled=true output.animate=true
"""

import logging
import sys
from pathlib import Path

import hydra
import mlflow
from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

load_dotenv()
sys.path.insert(0, str(Path(__file__).parent / "src"))

from ldc import SimpleSolver  # noqa: E402
from postprocessing import (  # noqa: E402
    FieldAnimation,
    compute_ghia_errors,
    find_vortex_center,
    plot_centerline_comparison,
    plot_convergence,
    plot_fields,
)
from utilities import load_environment  # noqa: E402
from utilities.mlflow import set_experiment, setup_mlflow_tracking  # noqa: E402

log = logging.getLogger(__name__)


def get_experiment_name(cfg: DictConfig) -> str:
    """Build full experiment name with optional prefix."""
    name = cfg.experiment_name
    prefix = cfg.mlflow.get("project_prefix", "")
    if prefix and not name.startswith("/"):
        return f"{prefix}/{name}"
    return name


def build_solver(cfg: DictConfig) -> SimpleSolver:
    """Solver from the environment file plus command-line overrides."""
    overrides = {
        "nx": cfg.N,
        "ny": cfg.N,
        "Re": cfg.Re,
        "max_iterations": cfg.max_iterations,
        "tolerance": cfg.tolerance,
        "convection_scheme": cfg.get("convection_scheme"),
    }
    env_path = Path(hydra.utils.to_absolute_path(cfg.environment))
    params = load_environment(env_path, overrides=overrides)
    return SimpleSolver(params)


def run_solver(cfg: DictConfig, solver: SimpleSolver, output_dir: Path):
    """Solve, then write HDF5 and figures into output_dir. Returns written paths."""
    animation = FieldAnimation(every=cfg.output.frame_every) if cfg.output.animate else None

    log.info(f"Solving: N={solver.params.nx}x{solver.params.ny} Re={solver.params.Re}")
    solver.solve(callback=animation)

    artifacts = []
    if cfg.output.save_h5:
        h5_path = output_dir / "solution.h5"
        solver.save(h5_path)
        artifacts.append(h5_path)

    if solver.metrics.diverged:
        log.warning("Skipping plots for a diverged run")
        return artifacts

    if cfg.output.plots:
        f = solver.fields
        artifacts.append(plot_fields(solver.x, solver.y, f.u, f.v, f.p, output_dir / "fields.png"))
        artifacts.append(plot_convergence(solver.time_series.to_dataframe(), output_dir / "convergence.png"))
        artifacts.append(plot_centerline_comparison(solver.x, solver.y, f.u, f.v, output_dir / "centerlines.png"))

    if animation is not None:
        artifacts.append(animation.save(output_dir / "cavity_flow.gif", fps=cfg.output.fps))

    return [a for a in artifacts if a is not None]


def validation_metrics(solver: SimpleSolver) -> dict:
    """Vortex centre and Ghia centreline errors (meaningful for Re = 100)."""
    f = solver.fields
    xc, yc, psi_min = find_vortex_center(solver.x, solver.y, f.u)
    errors = compute_ghia_errors(solver.x, solver.y, f.u, f.v)
    log.info(f"Primary vortex at ({xc:.4f}, {yc:.4f}), psi_min={psi_min:.4e}")
    return {"vortex_x": xc, "vortex_y": yc, "psi_min": psi_min,
            **{f"ghia_{k}": v for k, v in errors.items()}}


@hydra.main(config_path="conf", config_name="config", version_base=None)
def main(cfg: DictConfig) -> None:
    """Main entry point."""
    output_dir = Path(hydra.core.hydra_config.HydraConfig.get().runtime.output_dir)
    solver = build_solver(cfg)

    if not cfg.mlflow.enabled:
        artifacts = run_solver(cfg, solver, output_dir)
        if not solver.metrics.diverged:
            validation_metrics(solver)
        log.info(f"Wrote {len(artifacts)} files to {output_dir}")
        return

    setup_mlflow_tracking(cfg.mlflow.mode, cfg.mlflow.get("tracking_uri"))
    log.info(f"MLflow experiment: {set_experiment(get_experiment_name(cfg))}")

    run_name = f"simple_N{solver.params.nx}_Re{solver.params.Re:g}"
    with mlflow.start_run(run_name=run_name, tags={"solver": solver.params.method}) as run:
        mlflow.log_params(solver.params.to_mlflow())
        mlflow.log_dict(OmegaConf.to_container(cfg), "config.yaml")

        artifacts = run_solver(cfg, solver, output_dir)

        mlflow.log_metrics(solver.metrics.to_mlflow())
        if not solver.metrics.diverged:
            mlflow.log_metrics(validation_metrics(solver))

        batch = solver.time_series.to_mlflow_batch()
        if batch:
            mlflow.tracking.MlflowClient().log_batch(run.info.run_id, metrics=batch)

        for path in artifacts:
            mlflow.log_artifact(str(path))

    log.info(f"Done: {solver.metrics.iterations} iter, converged={solver.metrics.converged}, "
             f"time={solver.metrics.wall_time_seconds:.2f}s")


if __name__ == "__main__":
    main()
