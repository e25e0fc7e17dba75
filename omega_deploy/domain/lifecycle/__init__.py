"""CloudFormation custom resource lifecycle domain."""
