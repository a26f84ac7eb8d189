"""Bootstrap and readiness layer of the Conjur Kubernetes authenticator."""
