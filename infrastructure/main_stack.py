"""
Main CDK Stack for the voice-driven facility operations backend.
"""

from aws_cdk import (
    Stack,
    Tags,
    CfnOutput,
    aws_iam as iam,
)
from constructs import Construct

from infrastructure.constructs.data_layer import DataLayerConstruct
from infrastructure.constructs.api_layer import ApiLayerConstruct
from infrastructure.constructs.event_pipeline import EventPipelineConstruct
from infrastructure.config.settings import Settings


class FacilityOpsStack(Stack):
    """Main stack wiring all constructs together."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        settings: Settings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Global tags for cost/accounting.
        Tags.of(self).add("Project", "facility-ops")
        Tags.of(self).add("Environment", settings.environment)
        Tags.of(self).add("ManagedBy", "cdk")

        # 1) Network + data layer.
        data_construct = DataLayerConstruct(
            self,
            "DataLayer",
            environment=settings.environment,
            db_instance_class=settings.db_instance_class,
            db_allocated_storage=settings.db_allocated_storage,
        )

        # 2) Change notifications.
        event_construct = EventPipelineConstruct(
            self,
            "EventPipeline",
            environment=settings.environment,
        )

        # 3) API layer (single Lambda).
        api_construct = ApiLayerConstruct(
            self,
            "ApiLayer",
            environment=settings.environment,
            vpc=data_construct.vpc,
            db_secret_arn=data_construct.db_secret.secret_arn,
            conversations_table_name=data_construct.conversations_table.table_name,
            event_bus_name=event_construct.bus.event_bus_name,
            model_id=settings.model_id,
            polly_voice_id=settings.polly_voice_id,
            persist_unassigned_tickets=settings.persist_unassigned_tickets,
            speech_cache_max_bytes=settings.speech_cache_max_bytes,
            log_level=settings.log_level,
            lambda_memory_mb=settings.lambda_memory_mb,
            lambda_timeout_seconds=settings.lambda_timeout_seconds,
        )

        # Permissions for the API Lambda.
        main_lambda = api_construct.main_lambda
        data_construct.db_secret.grant_read(main_lambda)
        data_construct.db_instance.connections.allow_default_port_from(main_lambda)
        data_construct.conversations_table.grant_read_write_data(main_lambda)
        event_construct.bus.grant_put_events_to(main_lambda)

        main_lambda.add_to_role_policy(
            iam.PolicyStatement(
                actions=["bedrock:InvokeModel"],
                resources=["*"],
            )
        )
        main_lambda.add_to_role_policy(
            iam.PolicyStatement(
                actions=["polly:SynthesizeSpeech"],
                resources=["*"],
            )
        )

        # Outputs to quickly find resources.
        CfnOutput(self, "ApiEndpoint", value=api_construct.api.api_endpoint)
        CfnOutput(self, "ConversationsTable", value=data_construct.conversations_table.table_name)
        CfnOutput(self, "ChangeBusName", value=event_construct.bus.event_bus_name)
        CfnOutput(self, "DbSecretArn", value=data_construct.db_secret.secret_arn)
