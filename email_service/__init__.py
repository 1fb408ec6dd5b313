"""Order-confirmation email service."""
