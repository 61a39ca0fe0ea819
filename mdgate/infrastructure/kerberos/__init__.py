from mdgate.infrastructure.kerberos.di import KerberosProvider

__all__ = ["KerberosProvider"]
