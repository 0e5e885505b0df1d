"""
API layer construct: shared Lambda + HTTP API routes.

A single Lambda keeps the speech cache, DB pool and Bedrock client warm
across routes. Uses Docker bundling for dependencies (runs in CI/CD pipeline).
"""

from aws_cdk import (
    BundlingOptions,
    Duration,
    aws_ec2 as ec2,
    aws_lambda as _lambda,
    aws_apigatewayv2 as apigw,
    aws_apigatewayv2_integrations as integrations,
    aws_logs as logs,
)
from constructs import Construct

ROUTES = (
    (apigw.HttpMethod.GET, "/health"),
    (apigw.HttpMethod.POST, "/chat"),
    (apigw.HttpMethod.POST, "/speech"),
    (apigw.HttpMethod.POST, "/transcripts"),
    (apigw.HttpMethod.POST, "/transcripts/evaluate"),
    (apigw.HttpMethod.GET, "/dashboard"),
    (apigw.HttpMethod.GET, "/technicians"),
    (apigw.HttpMethod.PUT, "/technicians/{id}/status"),
    (apigw.HttpMethod.GET, "/tickets"),
    (apigw.HttpMethod.POST, "/tickets/{id}/close"),
    (apigw.HttpMethod.POST, "/conversations"),
    (apigw.HttpMethod.GET, "/conversations/{id}/messages"),
    (apigw.HttpMethod.POST, "/conversations/{id}/reset"),
)


class ApiLayerConstruct(Construct):
    """Expose the voice dispatch endpoints via HTTP API."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        vpc: ec2.IVpc,
        db_secret_arn: str,
        conversations_table_name: str,
        event_bus_name: str,
        model_id: str,
        polly_voice_id: str,
        persist_unassigned_tickets: bool = False,
        speech_cache_max_bytes: int = 4 * 1024 * 1024,
        log_level: str = "INFO",
        lambda_memory_mb: int = 512,
        lambda_timeout_seconds: int = 30,
    ) -> None:
        super().__init__(scope, construct_id)

        # Installs sqlalchemy, psycopg2-binary, pydantic, python-json-logger.
        bundled_code = _lambda.Code.from_asset(
            "src",
            bundling=BundlingOptions(
                image=_lambda.Runtime.PYTHON_3_12.bundling_image,
                command=[
                    "bash", "-c",
                    "pip install -r requirements-lambda.txt -t /asset-output && "
                    "cp -r . /asset-output"
                ],
            ),
        )

        self.main_lambda = _lambda.Function(
            self,
            "ApiHandler",
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="handlers.main.lambda_handler",
            code=bundled_code,
            memory_size=lambda_memory_mb,
            timeout=Duration.seconds(lambda_timeout_seconds),
            architecture=_lambda.Architecture.X86_64,
            vpc=vpc,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PRIVATE_ISOLATED),
            environment={
                "ENVIRONMENT": environment,
                "DB_SECRET_ARN": db_secret_arn,
                "CONVERSATIONS_TABLE": conversations_table_name,
                "EVENT_BUS_NAME": event_bus_name,
                "MODEL_ID": model_id,
                "POLLY_VOICE_ID": polly_voice_id,
                "PERSIST_UNASSIGNED_TICKETS": "true" if persist_unassigned_tickets else "false",
                "SPEECH_CACHE_MAX_BYTES": str(speech_cache_max_bytes),
                "LOG_LEVEL": log_level,
            },
            log_retention=logs.RetentionDays.ONE_WEEK,
        )

        self.api = apigw.HttpApi(
            self,
            "HttpApi",
            api_name=f"facility-ops-api-{environment}",
            cors_preflight=apigw.CorsPreflightOptions(
                allow_origins=["*"],
                allow_methods=[apigw.CorsHttpMethod.ANY],
                allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
            ),
        )

        integration = integrations.HttpLambdaIntegration(
            "LambdaIntegration", self.main_lambda
        )

        for method, path in ROUTES:
            self.api.add_routes(
                path=path,
                methods=[method],
                integration=integration,
            )
