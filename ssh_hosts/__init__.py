"""ssh-hosts — pick hosts from and add hosts to an OpenSSH client config."""

__version__ = "0.1.0"
