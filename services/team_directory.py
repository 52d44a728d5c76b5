from dataclasses import dataclass

COMPANY_KEY = "company"


@dataclass(frozen=True)
class RoutingTarget:
    key: str
    name: str
    email: str

    @property
    def is_company(self):
        return self.key == COMPANY_KEY


class TeamDirectory:
    """Maps a requested team member to the staff mailbox that gets notified.

    Members without a configured mailbox fall back to the company inbox;
    their name is still shown as the assignee.
    """

    def __init__(self, company_name, company_email, members=None):
        self.company = RoutingTarget(COMPANY_KEY, company_name, company_email)
        self.members = dict(members or {})

    @classmethod
    def from_config(cls, config):
        return cls(
            company_name=config["COMPANY_NAME"],
            company_email=config["COMPANY_EMAIL"],
            members=config.get("TEAM_MEMBERS", {}),
        )

    def normalize(self, key):
        """Unknown or empty keys route to the company."""
        key = (key or "").strip().lower()
        return key if key in self.members else COMPANY_KEY

    def resolve(self, key):
        key = self.normalize(key)
        if key == COMPANY_KEY:
            return self.company
        member = self.members[key]
        return RoutingTarget(key, member["name"], member.get("email") or self.company.email)
