"""Tests for auto scaling deleters.

Covers enumeration, lazy client creation and instance profile resolution.
"""

from __future__ import annotations

import json
from typing import Iterator
from unittest.mock import MagicMock, Mock, patch

import pytest
from botocore.exceptions import ClientError

from asgdeleter.deleter.autoscaling import AutoScalingGroupDeleter, LaunchConfigurationDeleter


def _profile(name: str) -> dict:
    return {
        "InstanceProfileName": name,
        "Arn": f"arn:aws:iam::123456789012:instance-profile/{name}",
        "Roles": [],
    }


class TestAutoScalingGroupDeleter:
    """Test suite for AutoScalingGroupDeleter."""

    def test_add_resource_names_appends(self, mock_client: MagicMock) -> None:
        """Test names accumulate in insertion order, duplicates kept."""
        deleter = AutoScalingGroupDeleter(client=mock_client)

        deleter.add_resource_names("b", "a")
        deleter.add_resource_names("b")

        assert deleter.resource_names == ["b", "a", "b"]

    def test_str_renders_type_and_names(self, mock_client: MagicMock) -> None:
        deleter = AutoScalingGroupDeleter(client=mock_client)
        deleter.add_resource_names("web")

        assert json.loads(str(deleter)) == {
            "Type": "AWS::AutoScaling::AutoScalingGroup",
            "Names": ["web"],
        }

    @patch("asgdeleter.deleter.base.create_boto_client")
    def test_client_created_once(self, mock_create_client: Mock) -> None:
        """Test the client is created lazily and reused."""
        deleter = AutoScalingGroupDeleter(region="us-west-2", profile="prod")

        mock_create_client.assert_not_called()
        first = deleter.client
        second = deleter.client

        assert first is second
        mock_create_client.assert_called_once_with(
            service_name="autoscaling",
            region_name="us-west-2",
            profile_name="prod",
        )

    def test_injected_client_is_used(self, mock_client: MagicMock) -> None:
        deleter = AutoScalingGroupDeleter(client=mock_client)

        assert deleter.client is mock_client

    def test_request_with_no_names(self, mock_client: MagicMock) -> None:
        """Test enumeration of an empty name list makes no call."""
        deleter = AutoScalingGroupDeleter(client=mock_client)

        assert deleter.request_resources() == []
        mock_client.get_paginator.assert_not_called()

    def test_request_single_page(self, mock_client: MagicMock, stub_paginators) -> None:
        """Test one page of groups is returned as-is."""
        paginators = stub_paginators(
            mock_client,
            {
                "describe_auto_scaling_groups": [
                    {"AutoScalingGroups": [{"AutoScalingGroupName": "web"}, {"AutoScalingGroupName": "worker"}]},
                ]
            },
        )
        deleter = AutoScalingGroupDeleter(client=mock_client)
        deleter.add_resource_names("web", "worker")

        groups = deleter.request_resources()

        assert [g["AutoScalingGroupName"] for g in groups] == ["web", "worker"]
        paginators["describe_auto_scaling_groups"].paginate.assert_called_once_with(
            AutoScalingGroupNames=["web", "worker"]
        )

    def test_request_concatenates_pages(self, mock_client: MagicMock, stub_paginators) -> None:
        """Test every page is kept in provider order, without sorting."""
        stub_paginators(
            mock_client,
            {
                "describe_auto_scaling_groups": [
                    {"AutoScalingGroups": [{"AutoScalingGroupName": "c"}]},
                    {"AutoScalingGroups": [{"AutoScalingGroupName": "a"}]},
                    {"AutoScalingGroups": [{"AutoScalingGroupName": "b"}]},
                ]
            },
        )
        deleter = AutoScalingGroupDeleter(client=mock_client)
        deleter.add_resource_names("a", "b", "c")

        groups = deleter.request_resources()

        assert [g["AutoScalingGroupName"] for g in groups] == ["c", "a", "b"]
        mock_client.get_paginator.assert_called_once_with("describe_auto_scaling_groups")

    def test_request_error_discards_pages(self, mock_client: MagicMock, stub_paginators, make_client_error) -> None:
        """Test a failed page raises and nothing is returned."""
        error = make_client_error("Throttling", "Rate exceeded", "DescribeAutoScalingGroups")

        def pages() -> Iterator[dict]:
            yield {"AutoScalingGroups": [{"AutoScalingGroupName": "a"}]}
            raise error

        stub_paginators(mock_client, {"describe_auto_scaling_groups": pages()})
        deleter = AutoScalingGroupDeleter(client=mock_client)
        deleter.add_resource_names("a", "b")

        with pytest.raises(ClientError) as exc_info:
            deleter.request_resources()

        assert exc_info.value is error


class TestLaunchConfigurationDeleter:
    """Test suite for LaunchConfigurationDeleter."""

    @pytest.fixture
    def iam_client(self) -> MagicMock:
        return MagicMock()

    @pytest.fixture
    def lc_deleter(self, mock_client: MagicMock, iam_client: MagicMock) -> LaunchConfigurationDeleter:
        deleter = LaunchConfigurationDeleter(client=mock_client, iam_client=iam_client)
        deleter.add_resource_names("web-lc", "worker-lc", "bare-lc")
        return deleter

    def test_request_concatenates_pages(self, mock_client: MagicMock, stub_paginators) -> None:
        paginators = stub_paginators(
            mock_client,
            {
                "describe_launch_configurations": [
                    {"LaunchConfigurations": [{"LaunchConfigurationName": "a"}]},
                    {"LaunchConfigurations": [{"LaunchConfigurationName": "b"}]},
                ]
            },
        )
        deleter = LaunchConfigurationDeleter(client=mock_client)
        deleter.add_resource_names("a", "b")

        lcs = deleter.request_resources()

        assert [lc["LaunchConfigurationName"] for lc in lcs] == ["a", "b"]
        paginators["describe_launch_configurations"].paginate.assert_called_once_with(
            LaunchConfigurationNames=["a", "b"]
        )

    @patch("asgdeleter.deleter.autoscaling.create_boto_client")
    def test_iam_client_created_once(self, mock_create_client: Mock, mock_client: MagicMock) -> None:
        deleter = LaunchConfigurationDeleter(client=mock_client, region="eu-west-1")

        assert deleter.iam_client is deleter.iam_client
        mock_create_client.assert_called_once_with(
            service_name="iam",
            region_name="eu-west-1",
            profile_name=None,
        )

    def test_instance_profiles_with_no_names(self, mock_client: MagicMock, iam_client: MagicMock) -> None:
        """Test resolution of an empty name list makes no calls."""
        deleter = LaunchConfigurationDeleter(client=mock_client, iam_client=iam_client)

        assert deleter.request_instance_profiles() == []
        mock_client.get_paginator.assert_not_called()
        iam_client.get_paginator.assert_not_called()

    def test_instance_profile_names_normalized(
        self, lc_deleter: LaunchConfigurationDeleter, mock_client: MagicMock, stub_paginators
    ) -> None:
        """Test ARN and bare references collapse to a set of names."""
        stub_paginators(
            mock_client,
            {
                "describe_launch_configurations": [
                    {
                        "LaunchConfigurations": [
                            {
                                "LaunchConfigurationName": "web-lc",
                                "IamInstanceProfile": "arn:aws:iam::123456789012:instance-profile/foo",
                            },
                            {"LaunchConfigurationName": "worker-lc", "IamInstanceProfile": "foo"},
                            {"LaunchConfigurationName": "bare-lc", "IamInstanceProfile": "bar"},
                            {"LaunchConfigurationName": "no-profile-lc"},
                            {
                                "LaunchConfigurationName": "bad-lc",
                                "IamInstanceProfile": "arn:aws:iam::123456789012:bar/",
                            },
                        ]
                    }
                ]
            },
        )

        assert lc_deleter.request_instance_profile_names() == {"foo", "bar"}

    def test_instance_profiles_filtered_by_reference(
        self,
        lc_deleter: LaunchConfigurationDeleter,
        mock_client: MagicMock,
        iam_client: MagicMock,
        stub_paginators,
    ) -> None:
        """Test only referenced profiles are returned, in listing order."""
        stub_paginators(
            mock_client,
            {
                "describe_launch_configurations": [
                    {
                        "LaunchConfigurations": [
                            {"LaunchConfigurationName": "web-lc", "IamInstanceProfile": "web"},
                            {
                                "LaunchConfigurationName": "worker-lc",
                                "IamInstanceProfile": "arn:aws:iam::123456789012:instance-profile/worker",
                            },
                        ]
                    }
                ]
            },
        )
        paginators = stub_paginators(
            iam_client,
            {
                "list_instance_profiles": [
                    {"InstanceProfiles": [_profile("worker"), _profile("foo")]},
                    {"InstanceProfiles": [_profile("other"), _profile("web")]},
                ]
            },
        )

        profiles = lc_deleter.request_instance_profiles()

        assert [p["InstanceProfileName"] for p in profiles] == ["worker", "web"]
        paginators["list_instance_profiles"].paginate.assert_called_once_with()

    def test_instance_profiles_from_given_records(
        self, lc_deleter: LaunchConfigurationDeleter, mock_client: MagicMock, iam_client: MagicMock, stub_paginators
    ) -> None:
        """Test already described launch configurations are not described again."""
        stub_paginators(iam_client, {"list_instance_profiles": [{"InstanceProfiles": [_profile("web")]}]})
        lcs = [{"LaunchConfigurationName": "web-lc", "IamInstanceProfile": "web"}]

        profiles = lc_deleter.request_instance_profiles(lcs)

        assert [p["InstanceProfileName"] for p in profiles] == ["web"]
        mock_client.get_paginator.assert_not_called()

    def test_malformed_reference_is_skipped(
        self,
        lc_deleter: LaunchConfigurationDeleter,
        mock_client: MagicMock,
        iam_client: MagicMock,
        stub_paginators,
    ) -> None:
        """Test an unparseable ARN yields no profile and no error."""
        stub_paginators(
            mock_client,
            {
                "describe_launch_configurations": [
                    {
                        "LaunchConfigurations": [
                            {
                                "LaunchConfigurationName": "web-lc",
                                "IamInstanceProfile": "arn:aws:iam::123456789012:bar/",
                            },
                            {"LaunchConfigurationName": "worker-lc", "IamInstanceProfile": "worker"},
                        ]
                    }
                ]
            },
        )
        stub_paginators(
            iam_client,
            {"list_instance_profiles": [{"InstanceProfiles": [_profile("bar"), _profile("worker")]}]},
        )

        profiles = lc_deleter.request_instance_profiles()

        assert [p["InstanceProfileName"] for p in profiles] == ["worker"]

    def test_enumeration_error_propagates(
        self,
        lc_deleter: LaunchConfigurationDeleter,
        mock_client: MagicMock,
        iam_client: MagicMock,
        stub_paginators,
        make_client_error,
    ) -> None:
        """Test launch configuration errors surface unchanged before any IAM call."""
        error = make_client_error("AccessDenied", "Not authorized", "DescribeLaunchConfigurations")

        def pages() -> Iterator[dict]:
            raise error
            yield  # pragma: no cover

        stub_paginators(mock_client, {"describe_launch_configurations": pages()})

        with pytest.raises(ClientError) as exc_info:
            lc_deleter.request_instance_profiles()

        assert exc_info.value is error
        iam_client.get_paginator.assert_not_called()

    def test_listing_error_propagates(
        self,
        lc_deleter: LaunchConfigurationDeleter,
        mock_client: MagicMock,
        iam_client: MagicMock,
        stub_paginators,
        make_client_error,
    ) -> None:
        stub_paginators(
            mock_client,
            {
                "describe_launch_configurations": [
                    {"LaunchConfigurations": [{"LaunchConfigurationName": "web-lc", "IamInstanceProfile": "web"}]}
                ]
            },
        )
        iam_client.get_paginator.side_effect = make_client_error("ServiceFailure", "IAM down")

        with pytest.raises(ClientError):
            lc_deleter.request_instance_profiles()
