"""The application logic shared by the Lambda function and the EC2 server."""

HELLO_WORLD_MESSAGE = "Hello world from omega-deploy!"


def hello_world() -> str:
    return HELLO_WORLD_MESSAGE
