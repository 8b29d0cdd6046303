#!/usr/bin/env python3
"""
Example client for the Office Nexus API.
This script walks through registering a company, its shareholders and a
dividend declaration.
"""

import os
from typing import Any, Dict, Optional

import requests


class NexusClient:
    """Client for interacting with the Office Nexus API."""

    def __init__(self, base_url: str = "http://localhost:8000"):
        self.base_url = base_url
        self.api_url = f"{base_url}/api/v1"

    def _company_url(self, company_id: int, path: str) -> str:
        return f"{self.api_url}/companies/{company_id}/{path}"

    def health_check(self) -> Dict[str, Any]:
        """Check if the API is running."""
        response = requests.get(f"{self.api_url}/health")
        return response.json()

    def create_company(self, name: str, tin: Optional[str] = None) -> Dict[str, Any]:
        response = requests.post(
            f"{self.api_url}/companies", json={"name": name, "tin": tin}
        )
        return response.json()

    def add_shareholder(
        self, company_id: int, first_name: str, last_name: str, shares: int
    ) -> Dict[str, Any]:
        """Register a person and record their shareholding."""
        response = requests.post(
            self._company_url(company_id, "persons"),
            json={"first_name": first_name, "last_name": last_name},
        )
        person = response.json()
        if not person.get("success"):
            return person

        data = {
            "person_id": person["data"]["id"],
            "shares_held": shares,
            "acquisition_date": "2026-01-01",
        }
        response = requests.post(self._company_url(company_id, "shareholders"), json=data)
        return response.json()

    def declare_dividend(
        self, company_id: int, profit: str, percentage: str, declaration_date: str
    ) -> Dict[str, Any]:
        """Declare, confirm and calculate a dividend."""
        data = {
            "profit_amount": profit,
            "dividend_percentage": percentage,
            "approved_by": "Board of Directors",
            "declaration_date": declaration_date,
        }
        response = requests.post(self._company_url(company_id, "dividends"), json=data)
        declaration = response.json()
        if not declaration.get("success"):
            return declaration

        declaration_id = declaration["data"]["id"]
        requests.post(
            self._company_url(company_id, f"dividends/{declaration_id}/confirm")
        )
        response = requests.post(
            self._company_url(company_id, f"dividends/{declaration_id}/calculate"),
            json={},
        )
        return response.json()

    def upload_document(
        self, company_id: int, file_path: str, title: str
    ) -> Dict[str, Any]:
        """Upload a document to the company vault."""
        with open(file_path, "rb") as f:
            files = {"file": (os.path.basename(file_path), f, "text/plain")}
            response = requests.post(
                self._company_url(company_id, "documents/upload"),
                files=files,
                data={"title": title},
            )
            return response.json()

    def export_report(
        self, company_id: int, export: str, export_format: str = "csv"
    ) -> bytes:
        response = requests.get(
            self._company_url(company_id, f"reports/{export}"),
            params={"format": export_format},
        )
        response.raise_for_status()
        return response.content


def main():
    """Main function to demonstrate the Office Nexus API."""
    client = NexusClient(os.getenv("NEXUS_API_URL", "http://localhost:8000"))

    print("Office Nexus API Client Demo")
    print("=" * 50)

    print("\n1. Checking API health...")
    try:
        health = client.health_check()
        print(f"API Status: {health}")
    except requests.exceptions.ConnectionError:
        print("Could not connect to API. Start the server with: python run.py")
        return

    print("\n2. Registering a company...")
    company = client.create_company("Kigali Demo Traders Ltd")
    if not company.get("success"):
        print(f"Company creation failed: {company}")
        return
    company_id = company["data"]["id"]
    print(f"Company ID: {company_id}")

    print("\n3. Adding shareholders...")
    for first, last, shares in (("Alice", "Uwase", 600), ("Jean", "Mugisha", 400)):
        result = client.add_shareholder(company_id, first, last, shares)
        print(f"  {first} {last}: {result['message']}")

    print("\n4. Declaring 40% of a 2,500,000 RWF profit as dividend...")
    result = client.declare_dividend(company_id, "2500000", "40", "2026-03-31")
    if result.get("success"):
        for distribution in result["data"]:
            print(
                f"  {distribution['shareholder_name']}: "
                f"{distribution['net_amount']} RWF net"
            )
    else:
        print(f"  Dividend failed: {result}")

    print("\n5. Exporting the shareholder register...")
    csv_bytes = client.export_report(company_id, "shareholders")
    print(csv_bytes.decode("utf-8"))

    print("\nDemo completed!")


if __name__ == "__main__":
    main()
