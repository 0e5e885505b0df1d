"""
Event pipeline: EventBridge bus for technician/ticket change notifications.

Dashboards re-query on any event; the bus keeps an archive and mirrors every
change into a log group so refresh storms can be traced.
"""

from aws_cdk import (
    Duration,
    RemovalPolicy,
    aws_events as events,
    aws_events_targets as targets,
    aws_logs as logs,
)
from constructs import Construct

EVENT_SOURCE = "facility.ops"


class EventPipelineConstruct(Construct):
    """Provision the change-notification bus."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
    ) -> None:
        super().__init__(scope, construct_id)

        self.bus = events.EventBus(
            self,
            "ChangeBus",
            event_bus_name=f"facility-ops-changes-{environment}",
        )

        change_pattern = events.EventPattern(
            source=[EVENT_SOURCE],
            detail_type=["TableChanged"],
            detail={"table": ["technicians", "tickets"]},
        )

        self.bus.archive(
            "ChangeArchive",
            event_pattern=change_pattern,
            retention=Duration.days(30 if environment == "prod" else 7),
        )

        self.change_log = logs.LogGroup(
            self,
            "ChangeLog",
            retention=logs.RetentionDays.ONE_WEEK,
            removal_policy=RemovalPolicy.DESTROY,
        )

        events.Rule(
            self,
            "ChangeToLogRule",
            event_bus=self.bus,
            event_pattern=change_pattern,
            targets=[targets.CloudWatchLogGroup(self.change_log)],
        )
