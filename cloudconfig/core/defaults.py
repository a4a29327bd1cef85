"""Embedded configuration used until a remote one has been applied"""
from cloudconfig.models.config import (
    ChainedServer,
    ClientConfig,
    Configuration,
    Masquerade,
    TrustedCA,
)

DIGICERT_HIGH_ASSURANCE_EV_ROOT_CA = """\
-----BEGIN CERTIFICATE-----
MIIDxTCCAq2gAwIBAgIQAqxcJmoLQJuPC3nyrkYldzANBgkqhkiG9w0BAQUFADBs
MQswCQYDVQQGEwJVUzEVMBMGA1UEChMMRGlnaUNlcnQgSW5jMRkwFwYDVQQLExB3
d3cuZGlnaWNlcnQuY29tMSswKQYDVQQDEyJEaWdpQ2VydCBIaWdoIEFzc3VyYW5j
ZSBFViBSb290IENBMB4XDTA2MTExMDAwMDAwMFoXDTMxMTExMDAwMDAwMFowbDEL
MAkGA1UEBhMCVVMxFTATBgNVBAoTDERpZ2lDZXJ0IEluYzEZMBcGA1UECxMQd3d3
LmRpZ2ljZXJ0LmNvbTErMCkGA1UEAxMiRGlnaUNlcnQgSGlnaCBBc3N1cmFuY2Ug
RVYgUm9vdCBDQTCCASIwDQYJKoZIhvcNAQEBBQADggEPADCCAQoCggEBAMbM5XPm
+9S75S0tMqbf5YE/yc0lSbZxKsPVlDRnogocsF9ppkCxxLeyj9CYpKlBWTrT3JTW
PNt0OKRKzE0lgvdKpVMSOO7zSW1xkX5jtqumX8OkhPhPYlG++MXs2ziS4wblCJEM
xChBVfvLWokVfnHoNb9Ncgk9vjo4UFt3MRuNs8ckRZqnrG0AFFoEt7oT61EKmEFB
Ik5lYYeBQVCmeVyJ3hlKV9Uu5l0cUyx+mM0aBhakaHPQNAQTXKFx01p8VdteZOE3
hzBWBOURtCmAEvF5OYiiAhF8J2a3iLd48soKqDirCmTCv2ZdlYTBoSUeh10aUAsg
EsxBu24LUTi4S8sCAwEAAaNjMGEwDgYDVR0PAQH/BAQDAgGGMA8GA1UdEwEB/wQF
MAMBAf8wHQYDVR0OBBYEFLE+w2kD+L9HAdSYJhoIAu9jZCvDMB8GA1UdIwQYMBaA
FLE+w2kD+L9HAdSYJhoIAu9jZCvDMA0GCSqGSIb3DQEBBQUAA4IBAQAcGgaX3Nec
nzyIZgYIVyHbIUf4KmeqvxgydkAQV8GK83rZEWWONfqe/EW1ntlMMUu4kehDLI6z
eM7b41N5cdblIZQB2lWHmiRk9opmzN6cN82oNLFpmyPInngiK3BD41VHMWEZ71jF
hS9OMPagMRYjyOfiZRYzy78aG6A9+MpeizGLYAiJLQwGXFK3xPkKmNEVX58Svnw2
Yzi9RKR/5CYrCsSXaQ3pjOLAEFe4yHYSkVXySGnYvCoCWw9E1CAx2/S6cCZdkGCe
vEsXCS+0yx5DaMkHJ8HSXPfqIbloEpw8nL+e/IBcm2PN7EeqJSdnoDfzAIJ9VNep
+OkuE6N36B9K
-----END CERTIFICATE-----
"""

DEFAULT_CHAINED_SERVERS = (
    ChainedServer(
        name="fallback-sg-1",
        addr="128.199.93.248:443",
        pipelined=True,
        weight=1000000,
        qos=10,
        trusted=True,
    ),
)

DEFAULT_MASQUERADE_SETS = {
    "cloudflare": (
        Masquerade(domain="cdnjs.cloudflare.com", ipaddress="104.16.51.111"),
        Masquerade(domain="www.cloudflare.com", ipaddress="104.16.124.96"),
    ),
}

DEFAULT_TRUSTED_CAS = (
    TrustedCA(
        commonname="DigiCert High Assurance EV Root CA",
        cert=DIGICERT_HIGH_ASSURANCE_EV_ROOT_CA,
    ),
)


def default_configuration() -> Configuration:
    """Return the embedded configuration.

    Always usable: it has a chained server and a trusted CA, so routing can be
    configured before the first fetch succeeds.
    """
    return Configuration(
        client=ClientConfig(
            chained_servers=DEFAULT_CHAINED_SERVERS,
            masquerade_sets=DEFAULT_MASQUERADE_SETS,
        ),
        trusted_cas=DEFAULT_TRUSTED_CAS,
    )
