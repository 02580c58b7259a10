"""Infrastructure implementations of the token issuer and notification sender."""
