"""Default configuration values and starter .camel-leaked.toml template."""

CONFIG_FILENAME = ".camel-leaked.toml"

DEFAULT_TOML = """\
# camel-leaked configuration
version = "1.0"

[scan]
min_entropy = 4.5         # bits per character; tokens at or above are reported
min_length = 20           # shortest token considered by the entropy detector
# rules_file = "config/rules.json"   # omit to use the built-in rules

[output]
format = "terminal"       # terminal | json
show_summary = true

[notify]
enabled = false
# smtp_host = "smtp.example.com"
# smtp_port = 587          # 465 = SSL, 587 = STARTTLS
# from_email = "security@company.com"
# SMTP_USER / SMTP_PASS / GITHUB_TOKEN are best supplied via environment
"""
