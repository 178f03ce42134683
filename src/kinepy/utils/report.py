"""Console summaries of kinematics results."""

from typing import Sequence

from rich.console import Console
from rich.table import Table

from kinepy.kinematics.ik_solver import IKResult
from kinepy.kinematics.solver import FKResult


def fk_result_table(result: FKResult, title: str = "Forward Transformation") -> Table:
    table = Table(title=title)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")
    table.add_row("Success", str(result.success))
    if result.pose is None:
        table.add_row("Failure", result.failure.value if result.failure else "-")
        return table
    p = result.pose
    table.add_row("Position (m)", f"({p.x:.4f}, {p.y:.4f}, {p.z:.4f})")
    table.add_row("Roll/Pitch/Yaw (rad)", f"({p.roll:.4f}, {p.pitch:.4f}, {p.yaw:.4f})")
    table.add_row("Gimbal lock", str(result.degenerate_orientation))
    return table


def ik_result_table(
    result: IKResult,
    joint_names: Sequence[str] | None = None,
    title: str = "Inverse Transformation",
) -> Table:
    table = Table(title=title)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")
    table.add_row("State", result.state.value)
    table.add_row("Iterations", str(result.iterations))
    table.add_row("Geometric seed", str(result.used_geometric_seed))
    table.add_row("Position error (m)", f"{result.position_error:.6f}")
    table.add_row("Orientation error (rad)", f"{result.orientation_error:.6f}")
    if result.joint_angles_rad is None:
        table.add_row("Failure", result.failure.value if result.failure else "-")
        return table
    if joint_names is None:
        joint_names = [f"joint_{i + 1}" for i in range(len(result.joint_angles_rad))]
    for name, angle in zip(joint_names, result.joint_angles_rad):
        table.add_row(name, f"{angle:.4f}")
    return table


def print_result(result: FKResult | IKResult, console: Console | None = None) -> None:
    """Print a result table to the console."""
    console = console or Console()
    if isinstance(result, FKResult):
        console.print(fk_result_table(result))
    else:
        console.print(ik_result_table(result))
