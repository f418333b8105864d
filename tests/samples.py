"""Representative WHOIS answers used across the test-suite."""

IANA_REFERRAL = """\
% IANA WHOIS server
% for more information on IANA, visit http://www.iana.org
% This query returned 1 object

refer:        whois.nic.ai

domain:       AI

organisation: Government of Anguilla
address:      P.O. Box 60
address:      Anguilla

contact:      administrative
name:         Ministry of Infrastructure

nserver:      A.LACTLD.ORG 200.0.68.10
nserver:      PCH.WHOIS.AI 204.61.216.95
nserver:      V0N0.NIC.AI 2001:4c0:1:7000::1
whois:        whois.nic.ai

status:       ACTIVE
remarks:      Registration information: http://nic.com.ai/

created:      1995-02-16
changed:      2021-04-27
source:       IANA
"""

REGISTERED_AI = """\
Domain Name: example.ai
Registry Domain ID: 6eddd132ab114b12bd2bd4cf9c492a04-DONUTS
Registrar WHOIS Server: whois.nic.ai
Registrar: Example Registrar, LLC
Registry Expiry Date: 2027-05-12T20:54:30Z
Domain Status: clientTransferProhibited
Name Server: ns1.example-dns.com
Name Server: ns2.example-dns.com
Name Server: V0N0.NIC.AI
"""

NOT_FOUND_AI = "Domain not found.\n>>> Last update of WHOIS database: 2026-10-19T10:00:00Z <<<\n"
