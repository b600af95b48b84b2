"""
Instance Commands.

Commands for querying instances and driving their lifecycle.
"""

from collections.abc import Callable
from datetime import datetime
from typing import List, Optional

import typer
from rich.console import Console

from clccam.cli.output import die, failure, humanize, label, new_table
from clccam.cli.state import get_state
from clccam.schemas.enums import InstanceOp
from clccam.schemas.instances import Instance, InstanceActivity
from clccam.services.instances import InstanceService

app = typer.Typer(help="Manage instances")
console = Console()

# Activity text is chopped at this many characters.
ACTIVITY_TEXT_WIDTH = 100


def _service(ctx: typer.Context) -> InstanceService:
    return InstanceService(get_state(ctx).client)


@app.command("ls")
def list_instances(
    ctx: typer.Context,
    instance_ids: Optional[List[str]] = typer.Argument(None, help="Instance IDs; all instances if omitted"),
) -> None:
    """List CAM instance(s), with their machines when IDs are given."""
    state = get_state(ctx)
    service = _service(ctx)

    if not instance_ids:
        with failure("failed to query instance list"):
            instances = service.list_instances()
        if not state.json:
            _display_instances(instances)
        return

    for instance_id in instance_ids:
        with failure(f"failed to query instance {instance_id}"):
            instance = service.get(instance_id)
        if state.json:
            continue
        _display_instances([instance])
        if instance.service.machines:
            table = new_table("Name", "State", title=f"{instance.name} machines")
            for machine in instance.service.machines:
                table.add_row(machine.name, label(machine.state))
            console.print(table)


@app.command()
def service(
    ctx: typer.Context,
    instance_id: str = typer.Argument(..., help="Instance ID"),
) -> None:
    """List the instance service: state history and machines."""
    state = get_state(ctx)
    with failure(f"failed to query instance {instance_id} service"):
        srv = _service(ctx).service(instance_id)
    if state.json:
        return

    console.print(
        f"{srv.clc_alias}/{srv.organization} {srv.type} service {srv.id}, "
        f"operation {label(srv.operation, 'n/a')}/{label(srv.state, 'n/a')}:",
        highlight=False,
    )

    if srv.state_history:
        table = new_table("State", "Operation", "Started", "Completed", title=f"{srv.id} states")
        history = sorted(srv.state_history, key=lambda s: s.started or s.completed or datetime.min)
        for entry in history:
            completed = "n/a"
            if entry.started and entry.completed:
                elapsed = round((entry.completed - entry.started).total_seconds())
                completed = f"{elapsed}s after start"
            table.add_row(entry.state, label(srv.operation), humanize(entry.started), completed)
        console.print(table)
    else:
        console.print(f"{srv.id}: no state history.", highlight=False)

    if srv.machines:
        table = new_table(
            "Host", "Provider ID", "IP", "State", "Agent Ping", "Agent Close",
            title=f"{srv.id} (Virtual) Machines",
        )
        for machine in srv.machines:
            table.add_row(
                machine.hostname or machine.name,
                machine.external_id,
                str(machine.address),
                label(machine.state),
                humanize(machine.last_agent_ping),
                humanize(machine.last_agent_close),
            )
        console.print(table)
    else:
        console.print(f"{srv.id}: no VMs.", highlight=False)


@app.command()
def activity(
    ctx: typer.Context,
    instance_id: str = typer.Argument(..., help="Instance ID"),
    op: Optional[str] = typer.Option(
        None, "--op", help=f"Filter by operation: {', '.join(InstanceOp.strings())}"
    ),
) -> None:
    """Retrieve instance activity logs."""
    state = get_state(ctx)
    with failure(f"failed to query instance {instance_id} activities"):
        activities = _service(ctx).activity(instance_id, op)
    if state.json:
        return
    if not activities:
        console.print(f"No {instance_id} activities reported.", highlight=False)
        return
    console.print(f"{instance_id} activities:", highlight=False)
    _display_activities(activities)


@app.command("operations")
def operations(
    ctx: typer.Context,
    instance_id: str = typer.Argument(..., help="Instance ID"),
) -> None:
    """List instance operations, including their activities."""
    state = get_state(ctx)
    with failure(f"failed to query instance {instance_id} operations"):
        ops = _service(ctx).operations(instance_id)
    if state.json:
        return
    if not ops:
        console.print("No information on operations.")
        return

    for op in ops:
        op_state = label(op.state)
        if op.instance_state != op.state:
            op_state = f"{op.state} (instance state {op.instance_state})"
        created = op.created.strftime("%d %b %H:%M UTC") if op.created else "n/a"
        console.print(
            f"{created} {label(op.operation)} => {op_state} on workspace {op.workspace}:",
            highlight=False,
        )
        _display_activities(op.activity)


@app.command()
def logs(
    ctx: typer.Context,
    instance_id: str = typer.Argument(..., help="Instance ID"),
    machine: Optional[str] = typer.Argument(None, help="Machine name; needed if the instance has several"),
) -> None:
    """Retrieve VM log output."""
    state = get_state(ctx)
    service = _service(ctx)

    if not machine:
        with failure(f"failed to query {instance_id} machines"):
            machines = service.get(instance_id).service.machines
        if not machines:
            console.print("No machines available")
            return
        if len(machines) > 1:
            die(f"unable to retrieve logs: {instance_id} has more than 1 machine")
        machine = machines[0].name

    with failure(f"failed to query instance {instance_id} logs"):
        output = service.machine_logs(instance_id, machine)
    if state.json:
        return
    if not output:
        console.print("No log information.")
        return
    console.print(output, highlight=False, markup=False, soft_wrap=True)


@app.command()
def bindings(
    ctx: typer.Context,
    instance_id: str = typer.Argument(..., help="Instance ID"),
) -> None:
    """Query instance bindings."""
    state = get_state(ctx)
    with failure(f"failed to query instance {instance_id} bindings"):
        found = _service(ctx).bindings(instance_id)
    if state.json:
        return
    if not found:
        console.print("No binding information.")
        return

    table = new_table("Name", "ID", "Owner", "Instances", "Updated")
    for binding in found:
        table.add_row(
            binding.name,
            binding.id,
            binding.owner,
            str(len(binding.instances)),
            humanize(binding.updated),
        )
    console.print(table)


def _for_each(
    ctx: typer.Context,
    instance_ids: list[str],
    what: str,
    action: Callable[[InstanceService, str], None],
) -> None:
    service = _service(ctx)
    for instance_id in instance_ids:
        with failure(f"failed to {what} {instance_id}"):
            action(service, instance_id)


@app.command()
def deploy(
    ctx: typer.Context,
    instance_ids: List[str] = typer.Argument(..., help="Instance IDs"),
) -> None:
    """Re-deploy instance(s)."""
    _for_each(ctx, instance_ids, "re-deploy", InstanceService.deploy)


@app.command()
def poweron(
    ctx: typer.Context,
    instance_ids: List[str] = typer.Argument(..., help="Instance IDs"),
) -> None:
    """Power-on instance(s)."""
    _for_each(ctx, instance_ids, "power-on", InstanceService.power_on)


@app.command()
def shutdown(
    ctx: typer.Context,
    instance_ids: List[str] = typer.Argument(..., help="Instance IDs"),
) -> None:
    """Shut down instance(s)."""
    _for_each(ctx, instance_ids, "shut down", InstanceService.shutdown)


@app.command()
def reinstall(
    ctx: typer.Context,
    instance_ids: List[str] = typer.Argument(..., help="Instance IDs"),
) -> None:
    """Re-install instance(s)."""
    _for_each(ctx, instance_ids, "re-install", InstanceService.reinstall)


@app.command()
def reconfigure(
    ctx: typer.Context,
    instance_ids: List[str] = typer.Argument(..., help="Instance IDs"),
) -> None:
    """Reconfigure instance(s)."""
    _for_each(ctx, instance_ids, "re-configure", InstanceService.reconfigure)


@app.command("import")
def import_instances(
    ctx: typer.Context,
    instance_ids: List[str] = typer.Argument(..., help="Instance IDs"),
) -> None:
    """(Re-)import unregistered instance(s)."""
    _for_each(ctx, instance_ids, "import", InstanceService.import_)


@app.command("cancel-import")
def cancel_import(
    ctx: typer.Context,
    instance_ids: List[str] = typer.Argument(..., help="Instance IDs"),
) -> None:
    """Cancel a failed instance import."""
    _for_each(ctx, instance_ids, "cancel import", InstanceService.cancel_import)


@app.command("make-managed")
def make_managed(
    ctx: typer.Context,
    instance_id: str = typer.Argument(..., help="Instance ID"),
) -> None:
    """Delegate management of an instance's OS."""
    _for_each(ctx, [instance_id], "make managed instance", InstanceService.make_managed)


@app.command()
def terminate(
    ctx: typer.Context,
    instance_ids: List[str] = typer.Argument(..., help="Instance IDs"),
    force: bool = typer.Option(False, "--force", "-f", help="Force-terminate the instance"),
) -> None:
    """Terminate instance(s)."""
    op = "force_terminate" if force else "terminate"
    _for_each(
        ctx, instance_ids, op.replace("_", "-"),
        lambda service, instance_id: service.delete(instance_id, op),
    )


@app.command("rm")
def remove(
    ctx: typer.Context,
    instance_ids: List[str] = typer.Argument(..., help="Instance IDs"),
) -> None:
    """Delete instance(s)."""
    _for_each(
        ctx, instance_ids, "delete",
        lambda service, instance_id: service.delete(instance_id, "delete"),
    )


def _display_instances(instances: list[Instance]) -> None:
    if not instances:
        console.print("No instances.")
        return

    table = new_table("Name", "ID", "Machines", "Service", "Box", "Updated", "Operation", "State")
    for instance in instances:
        table.add_row(
            instance.name,
            instance.id,
            ", ".join(machine.name for machine in instance.service.machines),
            instance.service.id,
            label(instance.box),
            humanize(instance.updated),
            label(instance.operation.event) if instance.operation else "",
            label(instance.state),
        )
    console.print(table)


def _display_activities(activities: list[InstanceActivity]) -> None:
    if not activities:
        console.print("No activities reported.")
        return

    table = new_table("Time", "Text", "Level", "Event")
    for entry in activities:
        table.add_row(
            entry.created.strftime("%d %b %H:%M:%S.%f")[:-5] if entry.created else "",
            entry.text[:ACTIVITY_TEXT_WIDTH],
            entry.level,
            label(entry.event),
        )
    console.print(table)
