"""Platform-wide concerns: error shapes and request correlation."""
