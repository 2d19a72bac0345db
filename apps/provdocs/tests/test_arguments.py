from __future__ import annotations

from provdocs.arguments import parse_argument_reference, parse_attributes_reference
from provdocs.models import ArgumentEntry

_EC2_DOCS_LINK = (
    "[EC2 documentation](http://docs.aws.amazon.com/IAM/latest/UserGuide/"
    "id_roles_use_switch-role-ec2.html#roles-usingrole-ec2instance-permissions)"
)
_ROUTING_RULES_LINK = (
    "[routing rules](https://docs.aws.amazon.com/AWSCloudFormation/latest/UserGuide/"
    "aws-properties-s3-websiteconfiguration-routingrules.html)"
)


def test_parse_argument_reference_joins_continuation_lines() -> None:
    continuation = (
        "launch the instance with. Specified as the name of the Instance Profile. "
        f"Ensure your credentials have the correct permission according to the {_EC2_DOCS_LINK}, "
        "notably `iam:PassRole`."
    )
    arguments = parse_argument_reference(
        [
            "* `iam_instance_profile` - (Optional) The IAM Instance Profile to",
            continuation,
            "* `ipv6_address_count`- (Optional) A number of IPv6 addresses to associate.",
            "* `ipv6_addresses` - (Optional) Specify one or more IPv6 addresses",
            "* `tags` - (Optional) A mapping of tags to assign to the resource.",
        ]
    )

    assert arguments == {
        "iam_instance_profile": ArgumentEntry(
            description=f"The IAM Instance Profile to\n{continuation}"
        ),
        "ipv6_address_count": ArgumentEntry(
            description="A number of IPv6 addresses to associate."
        ),
        "ipv6_addresses": ArgumentEntry(description="Specify one or more IPv6 addresses"),
        "tags": ArgumentEntry(description="A mapping of tags to assign to the resource."),
    }


def test_parse_argument_reference_records_object_scope_children() -> None:
    audience = "A list of the intended recipients of the JWT."
    issuer = (
        "The base domain of the identity provider, such as the `endpoint` attribute of the "
        "[`aws_cognito_user_pool`](/docs/providers/aws/r/cognito_user_pool.html) resource."
    )
    arguments = parse_argument_reference(
        [
            "* `jwt_configuration` - (Optional) The configuration of a JWT authorizer. "
            "Required for the `JWT` authorizer type.",
            "Supported only for HTTP APIs.",
            "",
            "The `jwt_configuration` object supports the following:",
            "",
            f"* `audience` - (Optional) {audience}",
            f"* `issuer` - (Optional) {issuer}",
        ]
    )

    assert arguments == {
        "jwt_configuration": ArgumentEntry(
            description="The configuration of a JWT authorizer. Required for the `JWT` "
            "authorizer type.\nSupported only for HTTP APIs.",
            arguments={"audience": audience, "issuer": issuer},
        ),
        "audience": ArgumentEntry(description=audience, is_nested=True),
        "issuer": ArgumentEntry(description=issuer, is_nested=True),
    }


def test_parse_argument_reference_continues_nested_entries_in_both_places() -> None:
    index_document = (
        "Amazon S3 returns this index document when requests are made to the root domain."
    )
    routing_rules = (
        f"A json array containing {_ROUTING_RULES_LINK}\n"
        "describing redirect behavior and when redirects are applied."
    )
    arguments = parse_argument_reference(
        [
            "* `website` - (Optional) A website object (documented below).",
            "~> **NOTE:** You cannot use `acceleration_status` in `cn-north-1` or `us-gov-west-1`",
            "",
            "The `website` object supports the following:",
            "",
            "* `index_document` - (Required, unless using `redirect_all_requests_to`) "
            + index_document,
            f"* `routing_rules` - (Optional) A json array containing {_ROUTING_RULES_LINK}",
            "describing redirect behavior and when redirects are applied.",
        ]
    )

    assert arguments == {
        "website": ArgumentEntry(
            description="A website object (documented below).\n"
            "~> **NOTE:** You cannot use `acceleration_status` in `cn-north-1` or `us-gov-west-1`",
            arguments={"index_document": index_document, "routing_rules": routing_rules},
        ),
        "index_document": ArgumentEntry(description=index_document, is_nested=True),
        "routing_rules": ArgumentEntry(description=routing_rules, is_nested=True),
    }


def test_parse_argument_reference_flattens_indented_bullets() -> None:
    type_description = "valid values are: `BLOCK`, `ALLOW`, or `COUNT`"
    arguments = parse_argument_reference(
        [
            "* `action` - (Optional) The action to take when a request matches.",
            f"  * `type` - (Required) {type_description}",
            "* `override_action` - (Optional) Override the action of a rule group.",
            f"  * `type` - (Required) {type_description}",
        ]
    )

    assert arguments == {
        "action": ArgumentEntry(description="The action to take when a request matches."),
        "override_action": ArgumentEntry(
            description="Override the action of a rule group."
        ),
        "type": ArgumentEntry(description=type_description),
    }


def test_parse_argument_reference_later_definition_wins() -> None:
    arguments = parse_argument_reference(
        [
            "* `priority` - (Optional) The priority associated with the rule.",
            "",
            "* `priority` is optional (with a default value of `0`) but must be unique "
            "between multiple rules",
        ]
    )

    assert arguments == {
        "priority": ArgumentEntry(
            description="is optional (with a default value of `0`) but must be unique "
            "between multiple rules"
        )
    }


def test_parse_argument_reference_nested_definition_overwrites_top_level() -> None:
    arguments = parse_argument_reference(
        [
            "* `name` - (Required) Resource name.",
            "* `rule` - (Optional) A `rule` block.",
            "",
            "The `rule` object supports the following:",
            "",
            "* `name` - (Required) Rule name.",
        ]
    )

    assert arguments["name"] == ArgumentEntry(description="Rule name.", is_nested=True)
    assert arguments["rule"].arguments == {"name": "Rule name."}


def test_parse_argument_reference_bullet_scope_marker_is_not_an_entry() -> None:
    arguments = parse_argument_reference(
        [
            "* `allowed_audiences` (Optional) Allowed audience values to consider.",
            "* `retention_policy` - (Required) A `retention_policy` block as documented below.",
            "",
            "---",
            "* `retention_policy` supports the following:",
        ]
    )

    assert arguments == {
        "allowed_audiences": ArgumentEntry(description="Allowed audience values to consider."),
        "retention_policy": ArgumentEntry(
            description="A `retention_policy` block as documented below."
        ),
    }


def test_parse_argument_reference_heading_opens_scope() -> None:
    arguments = parse_argument_reference(
        [
            "* `result_configuration` - (Optional) Where query results are stored.",
            "",
            "#### result_configuration Argument Reference",
            "",
            "* `output_location` - (Optional) The S3 location.",
        ]
    )

    assert arguments["result_configuration"].arguments == {
        "output_location": "The S3 location."
    }
    assert arguments["output_location"].is_nested is True


def test_parse_argument_reference_nested_child_keeps_its_own_scope() -> None:
    arguments = parse_argument_reference(
        [
            "The `rule` object supports the following:",
            "* `filter` - (Optional) A filter block.",
            "The `filter` object supports the following:",
            "* `prefix` - (Optional) Object key prefix.",
        ]
    )

    assert arguments["rule"].arguments == {"filter": "A filter block."}
    assert arguments["filter"] == ArgumentEntry(
        description="A filter block.",
        is_nested=True,
        arguments={"prefix": "Object key prefix."},
    )


def test_parse_argument_reference_skips_unparseable_bullets() -> None:
    arguments = parse_argument_reference(
        [
            "* `name` - (Required) The name.",
            "* a bullet without a backtick name",
            "still part of nothing",
        ]
    )

    assert arguments == {"name": ArgumentEntry(description="The name.")}


def test_parse_argument_reference_tolerates_empty_input() -> None:
    assert parse_argument_reference([]) == {}
    assert parse_argument_reference(["", "random prose", "## Heading"]) == {}


def test_parse_attributes_reference() -> None:
    attributes = parse_attributes_reference(
        [
            "## Attributes Reference",
            "",
            "* `id` - The ID of the widget.",
            "* `arn` - The ARN of the widget,",
            "including its partition.",
            "",
            "trailing prose",
        ]
    )

    assert attributes == {
        "id": "The ID of the widget.",
        "arn": "The ARN of the widget,\nincluding its partition.",
    }
