# Copyright 2023, Chariot Solutions
# 
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
# 
#     http://www.apache.org/licenses/LICENSE-2.0
# 
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


import pytest

from unittest.mock import Mock, patch

from botocore.exceptions import ClientError, NoRegionError

from vpn_lookup.__main__ import main


@pytest.fixture
def clients():
    ec2_client = Mock()
    cfn_client = Mock()
    session = Mock()
    session.client.side_effect = lambda service: {'ec2': ec2_client, 'cloudformation': cfn_client}[service]
    with patch("boto3.session.Session", return_value=session) as session_class:
        yield session_class, ec2_client, cfn_client


def test_no_lookup_requested(clients, capsys):
    assert main([]) == 1
    assert "no lookup requested" in capsys.readouterr().err


def test_gateway_config_requires_stack(clients, capsys):
    assert main(["--customerGatewayConfig", "203.0.113.10"]) == 1
    assert "requires --stack" in capsys.readouterr().err


def test_route_tables(clients, capsys):
    session_class, ec2_client, _ = clients
    ec2_client.describe_route_tables.return_value = {'RouteTables': [
        {'RouteTableId': "rtb-public", 'Tags': [{'Key': "Name", 'Value': "PublicRouteTable"}]},
        {'RouteTableId': "rtb-private", 'Tags': [{'Key': "Name", 'Value': "PrivateRouteTable"}]},
    ]}
    assert main(["--routeTablesForVpc", "vpc-1111", "--region", "us-east-2", "--profile", "ops"]) == 0
    assert capsys.readouterr().out == "public: rtb-public\nprivate: rtb-private\n"
    session_class.assert_called_once_with(profile_name="ops", region_name="us-east-2")


def test_vpcs_for_instances(clients, capsys):
    _, ec2_client, _ = clients
    ec2_client.describe_instances.return_value = {'Reservations': [{'Instances': [
        {'InstanceId': "i-1", 'VpcId': "vpc-1111"},
        {'InstanceId': "i-2", 'VpcId': "vpc-1111"},
    ]}]}
    assert main(["--vpcsForInstances", "i-1", "i-2"]) == 0
    assert capsys.readouterr().out == "vpc-1111\n"
    ec2_client.describe_instances.assert_called_once_with(InstanceIds=["i-1", "i-2"])


def test_customer_gateway_config(clients, capsys):
    _, ec2_client, cfn_client = clients
    cfn_client.describe_stacks.return_value = {'Stacks': [
        {'StackName': "vpn-stack", 'Outputs': [{'OutputKey': "CustomerGateway", 'OutputValue': "cgw-1"}]}]}
    ec2_client.describe_vpn_connections.return_value = {'VpnConnections': [
        {'CustomerGatewayConfiguration': "<ip_address>203.0.113.10</ip_address>"}]}
    assert main(["--customerGatewayConfig", "203.0.113.10", "--stack", "vpn-stack"]) == 0
    assert capsys.readouterr().out == "<ip_address>203.0.113.10</ip_address>\n"


def test_stack_outputs(clients, capsys):
    _, _, cfn_client = clients
    cfn_client.describe_stacks.return_value = {'Stacks': [
        {'StackName': "vpn-stack", 'Outputs': [{'OutputKey': "CustomerGateway", 'OutputValue': "cgw-1"}]}]}
    assert main(["--stack", "vpn-stack"]) == 0
    assert capsys.readouterr().out == "CustomerGateway: cgw-1\n"


def test_lookup_failure_exit_code(clients, capsys):
    _, ec2_client, _ = clients
    ec2_client.describe_route_tables.return_value = {'RouteTables': []}
    assert main(["--routeTablesForVpc", "vpc-1111"]) == 2
    assert "route table ids not found" in capsys.readouterr().err


def test_unknown_flag_is_usage_error(clients, capsys):
    assert main(["--bogus"]) == 1
    assert "unrecognized arguments: --bogus" in capsys.readouterr().err


def test_missing_flag_value_is_usage_error(clients, capsys):
    assert main(["--routeTablesForVpc"]) == 1
    assert "expected one argument" in capsys.readouterr().err


def test_help_exits_cleanly(clients, capsys):
    assert main(["--help"]) == 0
    assert "--routeTablesForVpc" in capsys.readouterr().out


def test_api_error_exit_code(clients, capsys):
    _, ec2_client, _ = clients
    ec2_client.describe_instances.side_effect = ClientError(
        {'Error': {'Code': "UnauthorizedOperation", 'Message': "denied"}}, "DescribeInstances")
    assert main(["--vpcsForInstances", "i-1"]) == 2
    err = capsys.readouterr().err
    assert "UnauthorizedOperation" in err
    assert "DescribeInstances" in err


def test_missing_region_exit_code(clients, capsys):
    session_class, _, _ = clients
    session_class.return_value.client.side_effect = NoRegionError()
    assert main(["--routeTablesForVpc", "vpc-1111"]) == 2
    assert "You must specify a region." in capsys.readouterr().err
