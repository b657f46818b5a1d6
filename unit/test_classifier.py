"""Test action classification and status replay."""

import pytest

from timeline.models import (
    ActionType,
    BillStatus,
    Chamber,
    LawCitation,
    RuleContext,
    VoteType,
)
from timeline.parser import ActionClassifier, classify_actions, latest_status
from unit.fixtures import ActionText
from unit.fixtures.action_factory import ActionFactory


@pytest.fixture
def classifier():
    """Classifier with the default rule cascade."""
    return ActionClassifier()


def classify(classifier, text, bill_type="hr", prev=BillStatus.INTRODUCED, title=""):
    context = RuleContext(
        bill_id=f"{bill_type}1-116", bill_type=bill_type, prev_status=prev, official_title=title
    )
    return classifier.classify(ActionFactory.raw(text), context)


class TestHouseVotes:
    """House votes on passage."""

    def test_voice_vote_passage(self, classifier):
        """Originating-chamber voice vote."""
        action = classify(classifier, ActionText.HOUSE_PASSED.value)
        assert action.type == ActionType.VOTE
        assert action.vote_type == VoteType.VOTE
        assert action.chamber == Chamber.HOUSE
        assert action.how == "by voice vote"
        assert action.result == "pass"
        assert action.roll is None
        assert action.status == BillStatus.PASS_OVER_HOUSE

    def test_roll_call_under_suspension(self, classifier):
        """Recorded suspension votes carry the roll number."""
        text = (
            "On motion to suspend the rules and pass the bill, as amended Agreed to "
            "by the Yeas and Nays: (2/3 required): 402 - 12 (Roll no. 93)."
        )
        action = classify(classifier, text)
        assert action.how == "roll"
        assert action.roll == 93
        assert action.suspension is True
        assert action.as_amended is True
        assert action.status == BillStatus.PASS_OVER_HOUSE

    def test_second_chamber_house_vote(self, classifier):
        """A Senate bill passing the House unamended has cleared Congress."""
        action = classify(classifier, ActionText.HOUSE_PASSED.value, bill_type="s",
                          prev=BillStatus.PASS_OVER_SENATE)
        assert action.vote_type == VoteType.VOTE2
        assert action.status == BillStatus.PASSED_BILL

    def test_veto_override(self, classifier):
        """Override language marks an override vote."""
        text = (
            "On passage, the objections of the President to the contrary notwithstanding "
            "Passed by the Yeas and Nays: (2/3 required): 300 - 100 (Roll no. 200)."
        )
        action = classify(classifier, text, prev=BillStatus.PROV_KILL_VETO)
        assert action.vote_type == VoteType.OVERRIDE
        assert action.roll == 200
        assert action.status == BillStatus.VETOED_OVERRIDE_PASS_OVER_HOUSE

    def test_deemed_passage(self, classifier):
        """Passage by special rule has no vote method of its own."""
        action = classify(classifier, "Passed House pursuant to H. Res. 5.")
        assert action.type == ActionType.VOTE
        assert action.how == "by special rule"
        assert action.result == "pass"
        assert action.status == BillStatus.PASS_OVER_HOUSE


class TestSenateVotes:
    """Senate votes."""

    def test_unanimous_consent_second_chamber(self, classifier):
        """A House bill passing the Senate without amendment."""
        action = classify(classifier, ActionText.SENATE_PASSED.value, prev=BillStatus.PASS_OVER_HOUSE)
        assert action.chamber == Chamber.SENATE
        assert action.vote_type == VoteType.VOTE2
        assert action.how == "by Unanimous Consent"
        assert action.as_amended is False
        assert action.status == BillStatus.PASSED_BILL

    def test_amended_pass_goes_back(self, classifier):
        """Passing with an amendment sends the bill back."""
        action = classify(
            classifier,
            "Passed Senate with an amendment by Unanimous Consent.",
            prev=BillStatus.PASS_OVER_HOUSE,
        )
        assert action.as_amended is True
        assert action.status == BillStatus.PASS_BACK_SENATE

    def test_cloture_invoked(self, classifier):
        """Cloture is an auxiliary vote and does not change status."""
        text = (
            "Cloture motion on the motion to proceed to the measure invoked in Senate "
            "by Yea-Nay Vote. 60 - 38. Record Vote Number: 45."
        )
        action = classify(classifier, text, bill_type="s", prev=BillStatus.REPORTED)
        assert action.type == ActionType.VOTE_AUX
        assert action.vote_type == VoteType.CLOTURE
        assert action.result == "pass"
        assert action.how == "roll"
        assert action.roll == 45
        assert action.status is None

    def test_cloture_not_invoked(self, classifier):
        """Failed cloture provisionally kills the bill."""
        text = (
            "Cloture on the motion to proceed to the bill not invoked in Senate "
            "by Yea-Nay Vote. 55 - 45. Record Vote Number: 100."
        )
        action = classify(classifier, text, bill_type="s", prev=BillStatus.REPORTED)
        assert action.result == "fail"
        assert action.status == BillStatus.PROV_KILL_CLOTUREFAILED

    def test_senate_override_enacts_house_bill(self, classifier):
        """The second chamber's override makes the bill law."""
        text = "Passed Senate over veto by Yea-Nay Vote. 70 - 30. Record Vote Number: 300."
        action = classify(classifier, text, prev=BillStatus.VETOED_OVERRIDE_PASS_OVER_HOUSE)
        assert action.vote_type == VoteType.OVERRIDE
        assert action.status == BillStatus.ENACTED_VETO_OVERRIDE


class TestProceduralActions:
    """Referral, reporting and presidential actions."""

    def test_referral(self, classifier):
        """An introduced bill is referred."""
        action = classify(classifier, ActionText.REFERRAL.value)
        assert action.type == ActionType.REFERRAL
        assert action.status == BillStatus.REFERRED

    def test_second_referral_keeps_status(self, classifier):
        """Referral after reporting is not a step back."""
        action = classify(classifier, ActionText.REFERRAL.value, prev=BillStatus.REPORTED)
        assert action.type == ActionType.REFERRAL
        assert action.status is None

    def test_reported(self, classifier):
        """Reporting records the committee."""
        action = classify(classifier, ActionText.REPORTED.value, prev=BillStatus.REFERRED)
        assert action.type == ActionType.REPORTED
        assert action.committee == "the Judiciary"
        assert action.status == BillStatus.REPORTED

    def test_calendar(self, classifier):
        """Calendar placement counts as reporting."""
        action = classify(
            classifier,
            "Placed on the Union Calendar, Calendar No. 12.",
            prev=BillStatus.REFERRED,
        )
        assert action.type == ActionType.CALENDAR
        assert action.status == BillStatus.REPORTED

    def test_signed(self, classifier):
        """Signature enacts the bill."""
        action = classify(classifier, ActionText.SIGNED.value, prev=BillStatus.PASSED_BILL)
        assert action.type == ActionType.SIGNED
        assert action.status == BillStatus.ENACTED_SIGNED

    def test_vetoed(self, classifier):
        """A regular veto."""
        action = classify(classifier, ActionText.VETOED.value, prev=BillStatus.PASSED_BILL)
        assert action.type == ActionType.VETOED
        assert action.pocket is None
        assert action.status == BillStatus.PROV_KILL_VETO

    def test_pocket_veto(self, classifier):
        """Pocket vetoes are flagged."""
        action = classify(classifier, "Pocket Vetoed by President.", prev=BillStatus.PASSED_BILL)
        assert action.pocket is True
        assert action.status == BillStatus.VETOED_POCKET

    def test_ten_day_rule(self, classifier):
        """Becoming law unsigned."""
        action = classify(
            classifier,
            "Sent to Archivist of the United States unsigned.",
            prev=BillStatus.PASSED_BILL,
        )
        assert action.status == BillStatus.ENACTED_TENDAYRULE

    def test_presented(self, classifier):
        """Presentment has no status of its own."""
        action = classify(classifier, ActionText.PRESENTED.value, prev=BillStatus.PASSED_BILL)
        assert action.type == ActionType.TOPRESIDENT
        assert action.status is None

    def test_amendment_actions_are_not_classified(self, classifier):
        """Actions on amendments stay plain actions."""
        action = classify(classifier, "H.Amdt.12 Amendment (A001) offered by Mr. Smith.")
        assert action.type == ActionType.ACTION
        assert action.status is None

    def test_unmatched_text_is_plain_action(self, classifier):
        """Text no rule recognizes."""
        action = classify(classifier, ActionText.INTRODUCED.value)
        assert action.type == ActionType.ACTION
        assert action.status is None


class TestEnactment:
    """Law citations."""

    def test_law_after_passage(self, classifier):
        """The citation is recorded and status is left alone."""
        action = classify(classifier, ActionText.PUBLIC_LAW.value, prev=BillStatus.PASSED_BILL)
        assert action.type == ActionType.ENACTED
        assert action.law == LawCitation(kind="public", congress=116, number=123)
        assert action.to_dict()["law"] == {"kind": "public", "congress": 116, "number": 123}
        assert action.status is None

    def test_law_after_veto(self, classifier):
        """A law citation after a veto means the veto was overridden."""
        action = classify(classifier, ActionText.PUBLIC_LAW.value, prev=BillStatus.PROV_KILL_VETO)
        assert action.status == BillStatus.ENACTED_VETO_OVERRIDE

    def test_private_law(self, classifier):
        """Private laws are cited the same way."""
        action = classify(classifier, "Became Private Law No: 115-1.", prev=BillStatus.ENACTED_SIGNED)
        assert action.law == LawCitation(kind="private", congress=115, number=1)
        assert action.status is None


class TestReplay:
    """Status threaded through a whole timeline."""

    def test_bicameral_passage(self):
        """Referral, report, House and Senate passage of a House bill."""
        raw = ActionFactory.newest_first([
            ActionText.REFERRAL.value,
            ActionText.REPORTED.value,
            ActionText.HOUSE_PASSED.value,
            ActionText.SENATE_PASSED.value,
        ])
        actions = classify_actions(raw, "hr1234-116", "hr")
        assert [a.status for a in actions] == [
            BillStatus.REFERRED,
            BillStatus.REPORTED,
            BillStatus.PASS_OVER_HOUSE,
            BillStatus.PASSED_BILL,
        ]
        assert latest_status(actions, "2019-01-03") == (BillStatus.PASSED_BILL, "2019-01-06T00:00:00.000Z")

    def test_veto_then_law(self):
        """The law citation resolves the earlier veto."""
        raw = ActionFactory.newest_first([
            ActionText.HOUSE_PASSED.value,
            ActionText.SENATE_PASSED.value,
            ActionText.VETOED.value,
            ActionText.PUBLIC_LAW.value,
        ])
        actions = classify_actions(raw, "hr1234-116", "hr")
        assert actions[-1].status == BillStatus.ENACTED_VETO_OVERRIDE

    def test_status_only_stamped_on_changes(self):
        """Actions that do not move the bill carry no status."""
        raw = ActionFactory.newest_first([
            ActionText.INTRODUCED.value,
            ActionText.REFERRAL.value,
            ActionText.REFERRAL.value,
        ])
        actions = classify_actions(raw, "hr1234-116", "hr")
        assert [a.status for a in actions] == [None, BillStatus.REFERRED, None]

    def test_no_status_change_keeps_introduced(self):
        """Without status changes the bill stays introduced."""
        actions = classify_actions(ActionFactory.newest_first([ActionText.INTRODUCED.value]), "hr1-116", "hr")
        assert latest_status(actions, "2019-01-03") == (BillStatus.INTRODUCED, "2019-01-03")


class TestVoteTypeByBillType:
    """Only H.R. and S. bills take the originating vote type."""

    @pytest.mark.parametrize("bill_type,expected", [
        ("hjres", BillStatus.PASSED_BILL),
        ("hconres", BillStatus.PASSED_CONCURRENTRES),
        ("hres", BillStatus.PASSED_BILL),
    ])
    def test_house_passage_of_other_house_types(self, classifier, bill_type, expected):
        """House resolutions passing the House are second-round votes."""
        action = classify(classifier, ActionText.HOUSE_PASSED.value, bill_type=bill_type)
        assert action.vote_type == VoteType.VOTE2
        assert action.status == expected

    @pytest.mark.parametrize("bill_type,expected", [
        ("sjres", BillStatus.PASSED_BILL),
        ("sconres", BillStatus.PASSED_CONCURRENTRES),
        ("sres", BillStatus.PASSED_BILL),
    ])
    def test_senate_passage_of_other_senate_types(self, classifier, bill_type, expected):
        """Senate resolutions passing the Senate are second-round votes."""
        action = classify(classifier, ActionText.SENATE_PASSED.value, bill_type=bill_type)
        assert action.vote_type == VoteType.VOTE2
        assert action.status == expected

    def test_constitutional_amendment(self, classifier):
        """A joint resolution proposing an amendment."""
        title = "Proposing an amendment to the Constitution of the United States relative to X."
        action = classify(classifier, ActionText.HOUSE_PASSED.value, bill_type="hjres", title=title)
        assert action.status == BillStatus.PASSED_CONSTAMEND

    def test_senate_bill_in_senate(self, classifier):
        """S. bills still originate in the Senate."""
        action = classify(classifier, ActionText.SENATE_PASSED.value, bill_type="s")
        assert action.vote_type == VoteType.VOTE
        assert action.status == BillStatus.PASS_OVER_SENATE

    def test_deemed_passage_of_joint_resolution(self, classifier):
        """Deemed passage follows the same bill type rule."""
        action = classify(classifier, "Passed House pursuant to H. Res. 5.", bill_type="hjres")
        assert action.vote_type == VoteType.VOTE2
        assert action.status == BillStatus.PASSED_BILL


class TestTabling:
    """House motions to table the measure."""

    TABLED = "On motion to table the measure Agreed to by voice vote."

    def test_tabled_after_introduction(self, classifier):
        """Tabling an introduced bill fails it in its first chamber."""
        action = classify(classifier, self.TABLED)
        assert action.type == ActionType.VOTE
        assert action.vote_type == VoteType.VOTE
        assert action.result == "fail"
        assert action.how == "by voice vote"
        assert action.status == BillStatus.FAIL_ORIGINATING_HOUSE

    def test_tabled_simple_resolution(self, classifier):
        """House resolutions are always in their first chamber."""
        action = classify(classifier, self.TABLED, bill_type="hres", prev=BillStatus.REPORTED)
        assert action.vote_type == VoteType.VOTE
        assert action.status == BillStatus.FAIL_ORIGINATING_HOUSE

    def test_tabled_in_second_chamber(self, classifier):
        """Tabling a Senate bill that passed the Senate."""
        action = classify(classifier, self.TABLED, bill_type="s", prev=BillStatus.PASS_OVER_SENATE)
        assert action.vote_type == VoteType.VOTE2
        assert action.status == BillStatus.FAIL_SECOND_HOUSE


class TestCommitteeActions:
    """Reports, hearings and discharges."""

    def test_reported_93rd_congress(self, classifier):
        """The older Senate reporting form."""
        action = classify(
            classifier,
            "Reported to Senate from the Committee on Finance (without written report).",
            bill_type="s",
            prev=BillStatus.REFERRED,
        )
        assert action.type == ActionType.REPORTED
        assert action.committee == "Committee on Finance"
        assert action.status == BillStatus.REPORTED

    def test_hearings(self, classifier):
        """Hearings record the committee and leave status alone."""
        action = classify(
            classifier, "Committee on Armed Services. Hearings held.", prev=BillStatus.REFERRED
        )
        assert action.type == ActionType.HEARINGS
        assert action.committee == "Committee on Armed Services"
        assert action.status is None

    def test_discharged(self, classifier):
        """A discharged bill counts as reported."""
        action = classify(
            classifier,
            "Committee on Rules. Discharged by Unanimous Consent.",
            prev=BillStatus.REFERRED,
        )
        assert action.type == ActionType.DISCHARGED
        assert action.committee == "Rules"
        assert action.status == BillStatus.REPORTED

    def test_cleared_for_white_house(self, classifier):
        """Clearance is presentment."""
        action = classify(classifier, "Cleared for White House.", prev=BillStatus.PASSED_BILL)
        assert action.type == ActionType.TOPRESIDENT
        assert action.status is None


class TestConferenceAndPingpong:
    """Resolving differences between the chambers."""

    def test_conference_report_in_both_chambers(self):
        """Agreement in both chambers passes the bill."""
        raw = ActionFactory.newest_first([
            "On agreeing to the conference report Agreed to by the Yeas and Nays: "
            "250 - 170 (Roll no. 300).",
            "Senate agreed to conference report by Yea-Nay Vote. 70 - 28. Record Vote Number: 201.",
        ])
        actions = classify_actions(raw, "hr1234-116", "hr")
        assert [a.vote_type for a in actions] == [VoteType.CONFERENCE, VoteType.CONFERENCE]
        assert actions[0].roll == 300
        assert actions[1].roll == 201
        assert [a.status for a in actions] == [
            BillStatus.CONFERENCE_PASSED_HOUSE,
            BillStatus.PASSED_BILL,
        ]

    def test_house_agrees_to_senate_amendment(self, classifier):
        """The House accepting the Senate's changes clears the bill."""
        action = classify(
            classifier,
            "On motion that the House agree to the Senate amendment Agreed to by voice vote.",
            prev=BillStatus.PASS_BACK_SENATE,
        )
        assert action.vote_type == VoteType.PINGPONG
        assert action.chamber == Chamber.HOUSE
        assert action.status == BillStatus.PASSED_BILL

    def test_lowercase_senate_vote_is_not_a_vote(self, classifier):
        """Senate vote text is matched with its usual capitalization only."""
        action = classify(
            classifier,
            "passed senate without amendment by unanimous consent.",
            prev=BillStatus.PASS_OVER_HOUSE,
        )
        assert action.type == ActionType.ACTION
        assert action.status is None
