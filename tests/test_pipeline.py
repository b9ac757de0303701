"""
End-to-end test of the week pipeline: operating room, sites, closing roles.
"""
from core.entities import ClosingRole, Procedure
from scheduler.pipeline import run_week_pipeline


def test_week_pipeline_chains_bloc_sites_and_closing(
    worker, full_day_shift, site_demand, monday
):
    workers = [
        worker("b1", "instrumentiste", "s1"),
        worker("w1", "s1"),
        worker("w2", "s1"),
    ]
    plan = run_week_pipeline(
        workers,
        [full_day_shift(w.id) for w in workers],
        [site_demand("r1", "s1", quantity=2, linked="D")],
        [Procedure("p1", monday, "cataract", half_day="full_day")],
        {"cataract": {"instrumentiste": 1}},
        closure_sites=["s1"],
        timeout=10,
    )

    # the operating room books b1 for the day, so sites never see b1
    assert {(a.worker_id, a.category) for a in plan.bloc.assignments} == {
        ("b1", "instrumentiste")
    }
    assert "b1" not in {a.worker_id for a in plan.sites.assignments}
    assert {a.worker_id for a in plan.sites.assignments if a.category == "s1"} == {"w1", "w2"}

    (entry,) = plan.closing.log
    assert {entry.primary, entry.closer} == {"w1", "w2"}
    assert entry.closer_role == ClosingRole.SECONDARY

    slots = [a.slot for a in plan.assignments]
    assert len(slots) == len(set(slots)) == 6
    roles = {(a.worker_id, a.half_day.value): a.role for a in plan.assignments}
    assert roles[("b1", "morning")] == ClosingRole.NONE
    assert roles[(entry.closer, "afternoon")] == ClosingRole.SECONDARY
    assert roles[(entry.primary, "morning")] == ClosingRole.PRIMARY


def test_week_pipeline_without_procedures(worker, full_day_shift, site_demand):
    plan = run_week_pipeline(
        [worker("w1", "s1")],
        [full_day_shift("w1")],
        [site_demand("r1", "s1", linked="D")],
        [],
        {},
        closure_sites=["s1"],
        timeout=10,
    )
    assert plan.bloc.assignments == []
    assert plan.closing.log[0].closer == "w1"
    assert plan.closing.log[0].primary is None
    assert plan.to_dict()["assignments"][0]["role"] == "secondary"
