"""
CDK app entrypoint for the facility operations stack.

Deployment knobs come from ``-c key=value`` context first and environment
variables second, e.g. ``cdk deploy -c environment=prod``.
"""

import aws_cdk as cdk

from infrastructure.config.settings import Settings
from infrastructure.main_stack import FacilityOpsStack

CONTEXT_KEYS = (
    "environment",
    "region",
    "persist_unassigned_tickets",
    "speech_cache_max_bytes",
    "log_level",
)


def main() -> None:
    app = cdk.App()
    context = {key: app.node.try_get_context(key) for key in CONTEXT_KEYS}
    settings = Settings.from_environment(context)

    stack = FacilityOpsStack(
        app,
        f"FacilityOpsStack-{settings.environment}",
        settings=settings,
        env=cdk.Environment(
            account=app.node.try_get_context("account"),
            region=settings.aws_region,
        ),
    )
    for key, value in settings.tags.items():
        cdk.Tags.of(stack).add(key, value)

    app.synth()


if __name__ == "__main__":
    main()
