"""Listen to workflow lifecycle events on the in-memory bus."""

import asyncio

from sagaflow import InMemoryEventBus, WorkflowDefinition, WorkflowEngine, WorkflowStep


async def on_event(event):
    print(f"[{event.type}] {event.payload}")


async def main():
    bus = InMemoryEventBus()
    for event_type in ("workflow.started", "workflow.completed", "workflow.failed"):
        bus.subscribe(event_type, on_event)

    engine = WorkflowEngine(bus)

    async def greet(params, context):
        return f"hello {context.data['name']}"

    engine.register_action("greet", greet)
    engine.register_workflow(
        WorkflowDefinition(
            id="greeting",
            name="Greeting",
            steps=[WorkflowStep(id="greet", name="Greet", action_name="greet")],
        )
    )

    await engine.execute_workflow("greeting", {"data": {"name": "world"}})
    print(f"Event counts: {bus.get_event_counts()}")


if __name__ == "__main__":
    asyncio.run(main())
