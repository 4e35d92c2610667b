"""Back-office services for the call, marketing and user domains."""
