"""Order placement saga: reserve stock, charge card, ship.

Run directly, or through the CLI:

    sagaflow workflow run place-order --app guides.order_saga:build_engine \
        --data '{"sku": "A1", "amount": 42, "fail_charge": true}'
"""

import asyncio

from sagaflow import (
    CompensationSpec,
    RetryPolicy,
    WorkflowDefinition,
    WorkflowEngine,
    WorkflowStep,
)


async def reserve_stock(params, context):
    return {"reservation": f"res-{context.data.get('sku', 'unknown')}"}


async def release_stock(params, context):
    return {"released": context.outputs["reserve"]["reservation"]}


async def charge_card(params, context):
    if context.data.get("fail_charge"):
        raise RuntimeError("card declined")
    return {"charge_id": "ch-1", "amount": context.data.get("amount", 0)}


async def refund_card(params, context):
    return {"refunded": context.outputs["charge"]["charge_id"]}


async def ship_order(params, context):
    return {"carrier": params["carrier"]}


ORDER_WORKFLOW = WorkflowDefinition(
    id="place-order",
    name="Place order",
    version="1.0.0",
    retry_policy=RetryPolicy(max_attempts=2, delay_ms=100, backoff_multiplier=2),
    steps=[
        WorkflowStep(
            id="reserve",
            name="Reserve stock",
            action_name="inventory.reserve",
            compensation=CompensationSpec(action_name="inventory.release"),
        ),
        WorkflowStep(
            id="charge",
            name="Charge card",
            action_name="payments.charge",
            timeout_ms=5_000,
            condition=lambda ctx: ctx.data.get("amount", 0) > 0,
            compensation=CompensationSpec(action_name="payments.refund"),
        ),
        WorkflowStep(
            id="ship",
            name="Ship order",
            action_name="shipping.ship",
            params={"carrier": "ups"},
        ),
    ],
)


def build_engine() -> WorkflowEngine:
    engine = WorkflowEngine()
    engine.register_action("inventory.reserve", reserve_stock)
    engine.register_action("inventory.release", release_stock)
    engine.register_action("payments.charge", charge_card)
    engine.register_action("payments.refund", refund_card)
    engine.register_action("shipping.ship", ship_order)
    engine.register_workflow(ORDER_WORKFLOW)
    return engine


async def main():
    engine = build_engine()

    ok = await engine.execute_workflow("place-order", {"data": {"sku": "A1", "amount": 42}})
    print(f"{ok.id}: {ok.status.value} outputs={ok.context.outputs}")

    failed = await engine.execute_workflow(
        "place-order", {"data": {"sku": "A1", "amount": 42, "fail_charge": True}}
    )
    print(f"{failed.id}: {failed.status.value} error={failed.error}")
    for compensation in failed.compensations:
        print(f"  undo {compensation.step_id}: {compensation.status.value}")


if __name__ == "__main__":
    asyncio.run(main())
