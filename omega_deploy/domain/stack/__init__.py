"""CloudFormation resource graph domain."""
